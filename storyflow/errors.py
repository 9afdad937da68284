"""Story error taxonomy.

Every StoryError subclass except RendererAttachedError is offered to the
story's on_error hook instead of being raised by the controller. The default
hook re-raises; a custom hook may log and return, in which case the failed
operation ends at rest.
"""

from __future__ import annotations

from typing import Any


class StoryError(Exception):
    """Base class for all flow-control failures."""


class MissingSceneError(StoryError):
    """Navigation or a direct call targeted an unregistered scene id."""

    def __init__(self, scene_id: str) -> None:
        super().__init__(f'Scene "{scene_id}" does not exist.')
        self.scene_id = scene_id


class InvalidSceneResultError(StoryError):
    """A scene returned something other than nothing, a scene id or a menu."""

    def __init__(self, scene_id: str, value: Any) -> None:
        super().__init__(
            f'Scene "{scene_id}" returned an unsupported value: {value!r} '
            f"({type(value).__name__})"
        )
        self.scene_id = scene_id
        self.value = value


class InvalidMenuResultError(StoryError):
    """A menu resolved to something other than nothing or a scene id."""

    def __init__(self, value: Any) -> None:
        super().__init__(
            f"Unknown type returned by menu option: {value!r} ({type(value).__name__})"
        )
        self.value = value


class InvalidRendererSelectionError(StoryError):
    """The renderer option is neither a Renderer nor a usable renderer config."""

    def __init__(self, value: Any, reason: str = "") -> None:
        message = f"Invalid renderer selection: {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.value = value
        self.reason = reason


class NavigationLimitError(StoryError):
    """A navigation run exceeded the story's max_transitions limit."""

    def __init__(self, limit: int, scene_id: str) -> None:
        super().__init__(
            f"Navigation exceeded {limit} scene transitions (next scene: \"{scene_id}\")"
        )
        self.limit = limit
        self.scene_id = scene_id


class RendererAttachedError(StoryError):
    """A renderer already bound to one story was attached to another."""
