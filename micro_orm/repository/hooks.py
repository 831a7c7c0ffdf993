"""Before-write hooks.

A hook receives the column -> value dict that is about to be written and
returns the dict to write instead. Returning an empty or non-mapping value
aborts the save with BeforeHookInvalidError.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

Hook = Callable[[dict[str, Any]], Any]


def identity_hook(values: dict[str, Any]) -> dict[str, Any]:
    return values


@dataclass(frozen=True)
class RepositoryHooks:
    """Extension points invoked once per save, on the matching path only."""

    before_insert: Hook = identity_hook
    before_update: Hook = identity_hook
