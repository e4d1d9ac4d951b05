"""
SQLAlchemy column mixins for soft-deletable models.

A model carrying a ``deleted_at`` column is soft-deletable: the repository
trashes it by stamping ``deleted_at`` and hides trashed rows from the
default scope.

Indexes:
- Partial indexes on ``deleted_at`` keep "active rows" and "trashed rows"
  queries cheap.
- Set ``__soft_delete_unique_columns__ = ["slug"]`` (or a sequence of
  sequences, e.g. ``[["slug"], ["owner_id", "name"]]``) for uniqueness
  among active rows only. If your model defines ``__table_args__`` itself,
  extend ``SoftDeleteModelMixin.__table_args__(cls)`` or the indexes are
  omitted.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Index
from sqlalchemy.orm import Mapped, declared_attr, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SoftDeleteModelMixin:
    """Adds a nullable ``deleted_at`` column and soft-delete transitions."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    @property
    def trashed(self) -> bool:
        return self.deleted_at is not None

    def mark_trashed(self) -> None:
        self.deleted_at = utcnow()

    def mark_restored(self) -> None:
        self.deleted_at = None

    @declared_attr.directive
    def __table_args__(cls: Any) -> tuple[Any, ...]:  # noqa: N805
        active_where = cls.deleted_at.is_(None)
        trashed_where = cls.deleted_at.is_not(None)
        result: list[Index] = [
            Index(
                f"ix_{cls.__tablename__}_soft_delete_active",
                cls.deleted_at,
                postgresql_where=active_where,
                sqlite_where=active_where,
            ),
            Index(
                f"ix_{cls.__tablename__}_soft_delete_trashed",
                cls.deleted_at,
                postgresql_where=trashed_where,
                sqlite_where=trashed_where,
            ),
        ]
        raw = getattr(cls, "__soft_delete_unique_columns__", None)
        if raw:
            # ["slug"] -> one constraint; [["slug"], ["a", "b"]] -> two
            if isinstance(next(iter(raw), None), str):
                constraints: list[tuple[str, ...]] = [tuple(raw)]
            else:
                constraints = [tuple(cols) for cols in raw]
            for cols in constraints:
                result.append(
                    Index(
                        f"uq_{cls.__tablename__}_active_{'_'.join(cols)}",
                        *(getattr(cls, c) for c in cols),
                        unique=True,
                        postgresql_where=active_where,
                        sqlite_where=active_where,
                    )
                )
        return tuple(result)
