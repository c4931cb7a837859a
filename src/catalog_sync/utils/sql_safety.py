"""
SQL safety utilities for preventing SQL injection.

Collection names reach SQL as table identifiers and must be validated and
quoted before interpolation.
"""

import re

# Strict ASCII-only patterns for SQL identifiers
VALID_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
VALID_SCHEMA_TABLE = re.compile(
    r"^[a-zA-Z_][a-zA-Z0-9_]*(\.[a-zA-Z_][a-zA-Z0-9_]*)?$"
)


def validate_identifier(identifier: str) -> None:
    """
    Validate a SQL identifier (table name, column name, etc.).

    Args:
        identifier: The identifier to validate

    Raises:
        ValueError: If the identifier contains invalid characters
    """
    if not identifier:
        raise ValueError("SQL identifier cannot be empty")

    if not VALID_IDENTIFIER.match(identifier):
        raise ValueError(
            f"Invalid SQL identifier: {identifier!r}. "
            "Only ASCII letters, digits, and underscores are allowed, "
            "and must start with a letter or underscore."
        )


def quote_identifier(identifier: str) -> str:
    """Validate and double-quote a PostgreSQL identifier."""
    validate_identifier(identifier)
    return f'"{identifier}"'


def quote_collection(collection: str) -> str:
    """
    Validate and quote a collection name, optionally schema-qualified.

    Args:
        collection: Table name such as "products" or "catalog.products"

    Returns:
        Quoted identifier safe for use in SQL

    Raises:
        ValueError: If the name is invalid
    """
    if not collection:
        raise ValueError("Collection name cannot be empty")

    if not VALID_SCHEMA_TABLE.match(collection):
        raise ValueError(
            f"Invalid collection name: {collection!r}. "
            "Only ASCII letters, digits, and underscores are allowed."
        )

    return ".".join(quote_identifier(part) for part in collection.split("."))
