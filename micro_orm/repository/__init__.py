"""Repository layer - insert/update/delete/fetch orchestration."""

from __future__ import annotations

from micro_orm.repository.base import Repository
from micro_orm.repository.hooks import RepositoryHooks, identity_hook

__all__ = [
    "Repository",
    "RepositoryHooks",
    "identity_hook",
]
