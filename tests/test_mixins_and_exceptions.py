from __future__ import annotations

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from crudkit.persistence.sqlalchemy import SoftDeleteModelMixin
from crudkit.primitives.exceptions import (
    CrudKitError,
    DataAccessError,
    EntityNotFoundError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    PersistenceError,
    SoftDeleteNotSupportedError,
    ValidationError,
)


class Base(DeclarativeBase):
    pass


class Article(SoftDeleteModelMixin, Base):
    __tablename__ = "articles"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class Page(SoftDeleteModelMixin, Base):
    __tablename__ = "pages"
    __soft_delete_unique_columns__ = [["slug"], ["site", "title"]]
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    slug: Mapped[str] = mapped_column(String)
    site: Mapped[str] = mapped_column(String)
    title: Mapped[str] = mapped_column(String)


# --- SoftDeleteModelMixin ---


def test_mixin_adds_partial_indexes() -> None:
    names = {ix.name for ix in Article.__table__.indexes}

    assert "deleted_at" in Article.__table__.c
    assert names == {
        "ix_articles_soft_delete_active",
        "ix_articles_soft_delete_trashed",
    }


def test_unique_among_active_rows() -> None:
    unique = {ix.name for ix in Page.__table__.indexes if ix.unique}

    assert unique == {"uq_pages_active_slug", "uq_pages_active_site_title"}


def test_trash_transitions() -> None:
    article = Article(id=1)
    assert article.trashed is False

    article.mark_trashed()
    assert article.trashed is True
    assert article.deleted_at is not None
    assert article.deleted_at.tzinfo is not None

    article.mark_restored()
    assert article.trashed is False


# --- exceptions ---


def test_exception_hierarchy() -> None:
    assert issubclass(EntityNotFoundError, NotFoundError)
    assert issubclass(DataAccessError, PersistenceError)
    assert issubclass(PersistenceError, InfrastructureError)
    assert issubclass(SoftDeleteNotSupportedError, PersistenceError)
    for exc in (NotFoundError, ForbiddenError, ValidationError, InfrastructureError):
        assert issubclass(exc, CrudKitError)


def test_forbidden_default_message() -> None:
    assert str(ForbiddenError()) == "Forbidden. This item has relations to other items"


def test_validation_error_shapes() -> None:
    assert ValidationError().errors == {}
    assert ValidationError("bad").errors == {"__root__": ["bad"]}
    assert ValidationError({"age": ["too small"]}).errors == {"age": ["too small"]}
