"""SQLAlchemy mixins for common model patterns: CuidMixin, TimestampMixin, CreatedAtMixin."""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from tenantops.shared.utils.generators import generate_cuid


def enum_check(column: str, values: list[str]) -> str:
    """Build a CHECK expression restricting column to the given string values."""
    quoted = ", ".join("'{}'".format(v.replace("'", "''")) for v in values)
    return f"{column} IN ({quoted})"


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class CreatedAtMixin:
    """Mixin for created_at only (append-style rows)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )
