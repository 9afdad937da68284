"""Menu descriptors.

A menu is a mapping from player-visible label to action. An action is either
a literal value (usually a scene id) or a zero-argument callable whose return
value is used instead. The reserved "_" entry is never shown: it runs after
the player has chosen and before the chosen value is interpreted, whichever
option was picked.

    return {
        "Order an ale": "ale",
        "Leave": lambda: "road",
        "_": lambda: data.update(visited_bar=True),
    }
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

logger = logging.getLogger(__name__)

ALWAYS_KEY = "_"


async def resolve(value: Any) -> Any:
    """Await `value` if it is awaitable, otherwise return it as-is."""
    if inspect.isawaitable(value):
        return await value
    return value


class Menu(Mapping[str, Any]):
    """Visible label → action mapping plus an optional always-run entry."""

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        visible = dict(options or {})
        always = visible.pop(ALWAYS_KEY, None)
        if always is not None and not callable(always):
            logger.warning("Ignoring non-callable %r menu entry: %r", ALWAYS_KEY, always)
            always = None
        self._options = visible
        self.always: Callable[[], Any] | None = always

    @classmethod
    def from_value(cls, value: Menu | Mapping[str, Any]) -> Menu:
        if isinstance(value, Menu):
            return value
        return cls(value)

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    async def choose(self, label: str) -> Any:
        """Resolve a visible label to its value, calling the action if needed.

        Raises KeyError for labels that are not on the menu.
        """
        action = self._options[label]
        if callable(action):
            return await resolve(action())
        return action

    async def run_always(self) -> None:
        if self.always is not None:
            await resolve(self.always())

    def __getitem__(self, label: str) -> Any:
        return self._options[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self._options)

    def __len__(self) -> int:
        return len(self._options)

    def __repr__(self) -> str:
        return f"Menu({list(self._options)!r}, always={self.always is not None})"
