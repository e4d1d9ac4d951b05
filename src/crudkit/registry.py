"""Contract -> implementation registry with conflict detection."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .primitives.exceptions import RegistrationError

logger = logging.getLogger("crudkit.registry")


def _name(obj: Any) -> str:
    return getattr(obj, "__name__", None) or type(obj).__name__


class CrudRegistry:
    """Explicit table binding repository/service contracts to implementations.

    Build it once during bootstrapping and hand it to whatever wires your
    application together::

        registry = CrudRegistry()
        registry.bind(PostRepository, SQLAlchemyPostRepository)
        registry.bind_many({PostService: DefaultPostService})

        repo_cls = registry.resolve(PostRepository)

    **Conflict detection:** binding a contract that is already bound to a
    different implementation raises ``RegistrationError``. Re-binding the
    same implementation is a no-op.
    """

    def __init__(self) -> None:
        self._bindings: dict[Any, Any] = {}

    # ── Registration ─────────────────────────────────────────────

    def bind(self, contract: Any, implementation: Any) -> None:
        existing = self._bindings.get(contract)
        if existing is not None and existing is not implementation:
            msg = (
                f"Duplicate binding for {_name(contract)}: "
                f"{_name(existing)} already bound, "
                f"cannot bind {_name(implementation)}"
            )
            raise RegistrationError(msg)
        self._bindings[contract] = implementation
        logger.debug("Bound %s -> %s", _name(contract), _name(implementation))

    def bind_many(self, bindings: Mapping[Any, Any]) -> None:
        for contract, implementation in bindings.items():
            self.bind(contract, implementation)

    # ── Lookup ───────────────────────────────────────────────────

    def resolve(self, contract: Any) -> Any:
        try:
            return self._bindings[contract]
        except KeyError:
            raise RegistrationError(
                f"No implementation bound for {_name(contract)}"
            ) from None

    def is_bound(self, contract: Any) -> bool:
        return contract in self._bindings

    # ── Introspection ────────────────────────────────────────────

    def bindings(self) -> dict[Any, Any]:
        """Return a snapshot of all bindings."""
        return dict(self._bindings)

    # ── Cleanup ──────────────────────────────────────────────────

    def clear(self) -> None:
        """Remove every binding (testing utility)."""
        self._bindings.clear()


__all__ = ["CrudRegistry"]
