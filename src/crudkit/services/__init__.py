"""Application services built on the repository contract."""

from __future__ import annotations

from .crud import BaseCrudService, merge_relations

__all__ = ["BaseCrudService", "merge_relations"]
