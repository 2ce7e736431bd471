"""
Catalog Backend: Column Types & Numeric Limits
===============================================

What:  Bounds shared by the request schemas, the ORM model and the migration,
       plus the ExactDecimal column type used for prices.
How:   ExactDecimal is NUMERIC(precision, scale) on real databases. SQLite has
       no exact decimal storage (NUMERIC affinity becomes a binary float), so
       there the value is stored as a scaled BIGINT: 9.99 at scale 4 → 99900.
       Ordering, range filters and CHECK constraints keep working because the
       scaled integers order the same way as the decimals.

Values read back are canonicalized (trailing fractional zeros dropped), the
same form the request schemas produce, so a price reads back exactly as it
was returned on create.
"""

from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import BigInteger, Numeric
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

# NUMERIC(12, 4): up to 99,999,999.9999
PRICE_PRECISION = 12
PRICE_SCALE = 4

# Upper bound of a PostgreSQL INTEGER; also caps pagination offsets
INT4_MAX = 2_147_483_647


def canonical_decimal(value: Decimal) -> Decimal:
    """9.9900 → 9.99, 20.0000 → 20. Never switches to exponent notation."""
    if value == value.to_integral_value():
        return value.quantize(Decimal(1))
    return value.normalize()


class ExactDecimal(TypeDecorator):
    """Fixed-point decimal column that never round-trips through a float."""

    impl = Numeric
    cache_ok = True

    def __init__(self, precision: int, scale: int):
        super().__init__(precision=precision, scale=scale, asdecimal=True)
        self.precision = precision
        self.scale = scale

    def load_dialect_impl(self, dialect: Dialect):
        if dialect.name == "sqlite":
            return dialect.type_descriptor(BigInteger())
        return dialect.type_descriptor(
            Numeric(precision=self.precision, scale=self.scale, asdecimal=True)
        )

    def process_bind_param(self, value: Any, dialect: Dialect) -> Any:
        if value is None:
            return None
        value = Decimal(value)
        if dialect.name != "sqlite":
            return value
        scaled = value.scaleb(self.scale)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"{value} has more than {self.scale} decimal places")
        return int(scaled)

    def process_result_value(self, value: Any, dialect: Dialect) -> Optional[Decimal]:
        if value is None:
            return None
        if dialect.name == "sqlite":
            return canonical_decimal(Decimal(int(value)).scaleb(-self.scale))
        return canonical_decimal(Decimal(value))
