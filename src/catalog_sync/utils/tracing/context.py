"""
Span helpers for reconciliation code.

``trace_operation`` wraps a phase of a run (the whole run, the row phase,
the batch phase) in a span; ``add_span_attributes`` annotates whichever span
is current, so the driver can attach results without holding a reference.
"""

from contextlib import contextmanager

from opentelemetry import trace

from .tracer import get_tracer


def _set_attributes(span, attributes: dict) -> None:
    # Values are stringified; counters and paths both render the same way
    for key, value in attributes.items():
        span.set_attribute(key, str(value))


@contextmanager
def trace_operation(
    operation_name: str,
    kind: trace.SpanKind = trace.SpanKind.INTERNAL,
    **attributes
):
    """
    Run the enclosed block inside a new span.

    An exception leaving the block is recorded on the span, flagged with
    ``error``, ``error.type`` and ``error.message`` attributes, and re-raised
    unchanged.

    Args:
        operation_name: Span name, e.g. ``"catalog_reconciliation"``
        kind: OpenTelemetry span kind
        **attributes: Attributes set when the span starts

    Yields:
        The started span

    Example:
        >>> with trace_operation("execute_batch", collection="products") as span:
        ...     span.set_attribute("deleted", 3)
    """
    tracer = get_tracer()

    with tracer.start_as_current_span(operation_name, kind=kind) as span:
        _set_attributes(span, attributes)

        try:
            yield span
        except Exception as e:
            span.set_attribute("error", True)
            span.set_attribute("error.type", type(e).__name__)
            span.set_attribute("error.message", str(e))
            span.record_exception(e)
            raise


def add_span_attributes(**attributes):
    """
    Annotate the current span.

    Does nothing when no span is recording, e.g. when tracing was never
    initialized.

    Example:
        >>> with trace_operation("catalog_reconciliation"):
        ...     add_span_attributes(rows_processed=10000, status="SUCCESS")
    """
    current_span = trace.get_current_span()
    if current_span.is_recording():
        _set_attributes(current_span, attributes)
