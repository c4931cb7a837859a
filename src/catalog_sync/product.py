"""
Product record schema and flat-file row codec.

A product row carries the fields in a fixed order::

    _id,name,price,createdAt,updatedAt

Fields are joined by a single-character delimiter. Escaping of the delimiter
inside a field is not supported.
"""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

from .errors import ProductParseError

DEFAULT_DELIMITER = ","

# Header names in flat-file order
FIELD_NAMES = ("_id", "name", "price", "createdAt", "updatedAt")

# Fields that a reconciliation may overwrite
MUTABLE_FIELDS = ("name", "price", "created_at", "updated_at")


@dataclass(frozen=True)
class Product:
    """One catalog entry identified by ``product_id``."""

    product_id: str
    name: str
    price: Decimal
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if not self.product_id:
            raise ValueError("product_id cannot be empty")
        if self.price < 0:
            raise ValueError(f"price cannot be negative: {self.price}")

    def mutable_values(self) -> tuple:
        """Values of the mutable fields, in ``MUTABLE_FIELDS`` order."""
        return tuple(getattr(self, name) for name in MUTABLE_FIELDS)

    def with_changes(self, **changes) -> "Product":
        """Copy with some mutable fields replaced."""
        if "product_id" in changes:
            raise ValueError("product_id is immutable")
        return replace(self, **changes)

    def to_row(self, delimiter: str = DEFAULT_DELIMITER) -> str:
        """Serialize to a flat-file row (without trailing newline)."""
        values = [
            self.product_id,
            self.name,
            str(self.price),
            self.created_at.isoformat(),
            self.updated_at.isoformat(),
        ]
        for value in values:
            if delimiter in value:
                raise ValueError(
                    f"Field value {value!r} contains the delimiter {delimiter!r}"
                )
            if "\n" in value or "\r" in value:
                raise ValueError(f"Field value {value!r} contains a line break")
        return delimiter.join(values)

    @classmethod
    def from_row(
        cls, row: str, row_index: int, delimiter: str = DEFAULT_DELIMITER
    ) -> "Product":
        """
        Parse one flat-file row.

        Args:
            row: Raw row without trailing newline
            row_index: Index of the row among data rows (for error reporting)
            delimiter: Field delimiter

        Returns:
            Parsed product

        Raises:
            ProductParseError: If the row is malformed
        """
        parts = row.rstrip("\r").split(delimiter)
        if len(parts) != len(FIELD_NAMES):
            raise ProductParseError(
                row_index,
                f"expected {len(FIELD_NAMES)} fields, got {len(parts)}",
            )

        # Name is kept verbatim, padding included
        product_id, raw_price, raw_created, raw_updated = (
            part.strip() for part in (parts[0], *parts[2:])
        )
        name = parts[1]
        if not product_id:
            raise ProductParseError(row_index, "empty product id")

        try:
            price = Decimal(raw_price)
        except InvalidOperation:
            raise ProductParseError(row_index, f"invalid price {raw_price!r}") from None
        if not price.is_finite() or price < 0:
            raise ProductParseError(row_index, f"invalid price {raw_price!r}")

        return cls(
            product_id=product_id,
            name=name,
            price=price,
            created_at=_parse_timestamp(raw_created, row_index, "createdAt"),
            updated_at=_parse_timestamp(raw_updated, row_index, "updatedAt"),
        )


def header_row(delimiter: str = DEFAULT_DELIMITER) -> str:
    """Header row naming the fields in flat-file order."""
    return delimiter.join(FIELD_NAMES)


def _parse_timestamp(value: str, row_index: int, field_name: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise ProductParseError(
            row_index, f"invalid {field_name} timestamp {value!r}"
        ) from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


__all__ = [
    "Product",
    "FIELD_NAMES",
    "MUTABLE_FIELDS",
    "DEFAULT_DELIMITER",
    "header_row",
]
