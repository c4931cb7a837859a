"""
Utility modules for catalog reconciliation

Provides:
- logging: structured logging setup
- metrics: Prometheus metrics publishing
- tracing: OpenTelemetry spans
- sql_safety: SQL identifier validation
"""

__all__ = ["logging", "metrics", "tracing", "sql_safety"]
