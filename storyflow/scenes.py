"""Scene registry and scene transitions.

A scene is a function taking (characters, data) and returning one of:

  None                  : come to rest here
  RenderedLine          : come to rest here (a scene ending on a spoken line)
  "scene_id"            : go to that scene
  {label: action, ...}  : show a menu (see storyflow.menu)

Scenes may also return the explicit GotoScene / ShowMenu / NoNext values
below. Either way the controller converts the result once, via
to_transition(), before acting on it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

from storyflow.menu import Menu
from storyflow.renderer import RenderedLine

SceneLogic = Callable[[dict[str, Any], dict[str, Any]], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class NoNext:
    """Stop navigating; the story rests at the current scene."""


@dataclass(frozen=True)
class GotoScene:
    scene_id: str


@dataclass(frozen=True)
class ShowMenu:
    menu: Menu


Transition = Union[NoNext, GotoScene, ShowMenu]


def to_transition(value: Any) -> Transition | None:
    """Classify a scene's return value. Returns None for unsupported values."""
    if value is None or isinstance(value, RenderedLine):
        return NoNext()
    if isinstance(value, (NoNext, GotoScene, ShowMenu)):
        return value
    if isinstance(value, str):
        return GotoScene(value)
    if isinstance(value, Mapping):
        return ShowMenu(Menu.from_value(value))
    return None


class SceneRegistry:
    """Id → scene logic. Registering an existing id replaces it."""

    def __init__(self) -> None:
        self._scenes: dict[str, SceneLogic] = {}

    def register(self, id: str, logic: SceneLogic) -> None:
        self._scenes[id] = logic

    def get(self, id: str) -> SceneLogic | None:
        return self._scenes.get(id)

    def scene(self, id: str) -> Callable[[SceneLogic], SceneLogic]:
        """Decorator form of register()."""
        def decorator(logic: SceneLogic) -> SceneLogic:
            self.register(id, logic)
            return logic
        return decorator

    def __contains__(self, id: object) -> bool:
        return id in self._scenes

    def __iter__(self) -> Iterator[str]:
        return iter(self._scenes)

    def __len__(self) -> int:
        return len(self._scenes)
