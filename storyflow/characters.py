"""Characters, speaker handles and the per-story character registry.

Scenes never receive Character objects directly. They get a dict of
Speaker handles keyed by character id:

    async def tavern(c, data):
        c["n"]("The fire crackles.")
        c["b"]("Welcome, {{name}}!", name="traveller")
        c["b"].data["trust"] += 1

A Speaker always speaks as the character it was created for, while its
`.data` is looked up in the registry on every access, so re-registering an
id redirects data access to the new entry.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from storyflow.templates import line_context, render_line

if TYPE_CHECKING:
    from storyflow.story import Story

UNKNOWN_NAME = "???"


class Character:
    """A speaking entity. The narrator is an ordinary Character."""

    def __init__(
        self,
        story: Story,
        id: str,
        name: str = UNKNOWN_NAME,
        data: dict[str, Any] | None = None,
    ) -> None:
        self.story = story
        self._id = id
        self.name = name
        self.data: dict[str, Any] = data if data is not None else {}
        self._speaker: Speaker | None = None

    @property
    def id(self) -> str:
        return self._id

    def say(self, message: str, **values: Any) -> Any:
        """Send a line of dialogue to the story's renderer.

        Returns whatever the renderer's on_message returns.
        """
        text = render_line(str(message), line_context(self, self.story.data, values))
        return self.story.renderer.on_message(self, text)

    def as_speaker(self) -> Speaker:
        if self._speaker is None:
            self._speaker = Speaker(self)
        return self._speaker

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Character(id={self._id!r}, name={self.name!r})"


class Speaker:
    """Callable handle bound to one character."""

    __slots__ = ("_character",)

    def __init__(self, character: Character) -> None:
        self._character = character

    def __call__(self, message: str, **values: Any) -> Any:
        return self._character.say(message, **values)

    @property
    def character(self) -> Character:
        return self._character

    @property
    def id(self) -> str:
        return self._character.id

    @property
    def data(self) -> dict[str, Any]:
        current = self._character.story.characters.get(self._character.id)
        return (current or self._character).data

    def __str__(self) -> str:
        return str(self._character)

    def __repr__(self) -> str:
        return f"Speaker({self._character!r})"


class CharacterRegistry:
    """Id → Character mapping owned by one story."""

    def __init__(self, story: Story) -> None:
        self._story = story
        self._characters: dict[str, Character] = {}
        self._speakers: dict[str, Speaker] = {}

    def register(
        self,
        id: str,
        name: str = UNKNOWN_NAME,
        data: dict[str, Any] | None = None,
    ) -> Character:
        """Create or replace the character stored under `id`."""
        character = Character(self._story, id, name, data)
        self._characters[id] = character
        self._speakers[id] = character.as_speaker()
        return character

    def get(self, id: str) -> Character | None:
        return self._characters.get(id)

    def speakers(self) -> dict[str, Speaker]:
        """Fresh copy of the id → Speaker mapping handed to scenes."""
        return dict(self._speakers)

    def __getitem__(self, id: str) -> Character:
        return self._characters[id]

    def __contains__(self, id: object) -> bool:
        return id in self._characters

    def __iter__(self) -> Iterator[str]:
        return iter(self._characters)

    def __len__(self) -> int:
        return len(self._characters)
