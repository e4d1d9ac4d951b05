"""Validate raw query params through a Pydantic model."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..primitives.exceptions import ValidationError


def validate_query(
    model_cls: type[BaseModel],
    query_params: Mapping[str, Any],
) -> dict[str, Any]:
    """
    Validate *query_params* against *model_cls*.

    Returns only the fields the caller actually supplied, so absent
    parameters never turn into filters. Pydantic errors are re-raised as
    :class:`~crudkit.primitives.exceptions.ValidationError` carrying
    ``{location: [messages]}``.
    """
    try:
        instance = model_cls.model_validate(dict(query_params))
    except PydanticValidationError as exc:
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = ".".join(str(p) for p in error.get("loc", ("__root__",)))
            msg = error.get("msg", "validation error")
            errors.setdefault(loc or "__root__", []).append(msg)
        raise ValidationError(errors) from exc
    return instance.model_dump(exclude_unset=True)
