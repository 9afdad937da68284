"""Renderers: the presentation layer a Story talks to.

Every renderer extends Renderer, which implements the whole contract as
no-ops:

    on_message(character, text) -> Any         # return value goes back to say()
    async on_menu(menu) -> Any                 # resolves once the player chooses

Whatever on_message returns is also what a scene ending on `c["b"]("...")`
returns, so it must not be a str (a str result means "go to that scene").
A subclass overrides only what it needs. on_menu should resolve a chosen
label through `await menu.choose(label)` so callable actions run exactly
once; it may also return any other value, which the story interprets.

Two implementations ship with the engine:

    Renderer      : "silent"; swallows messages, menus resolve to None.
    TextRenderer  : "text"; writes to a text stream, reads choices from input().
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from storyflow.config import RendererConfig
from storyflow.errors import InvalidRendererSelectionError, RendererAttachedError
from storyflow.menu import Menu, resolve

if TYPE_CHECKING:
    from storyflow.characters import Character
    from storyflow.story import Story

logger = logging.getLogger(__name__)

ANSI_RESET = "\033[0m"
ANSI_STYLES = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "italic": "\033[3m",
    "underline": "\033[4m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
}


@dataclass(frozen=True)
class RenderedLine:
    """A line TextRenderer wrote out. Scenes returning one come to rest."""

    text: str

    def __str__(self) -> str:
        return self.text


async def read_input(prompt: str = "") -> str:
    return await asyncio.to_thread(input, prompt)


# ---------------------------------------------------------------------------
# Renderer: base class, does nothing
# ---------------------------------------------------------------------------

class Renderer:
    """No-op renderer. Extend it to present a story somewhere."""

    def __init__(self) -> None:
        self.story: Story | None = None

    def attach(self, story: Story) -> None:
        """Bind this renderer to its story. A renderer serves one story only."""
        if self.story is not None and self.story is not story:
            raise RendererAttachedError(
                f"{type(self).__name__} is already attached to another story"
            )
        self.story = story

    def is_narrator(self, character: Character) -> bool:
        return self.story is not None and character.id == self.story.narrator.id

    def on_message(self, character: Character, text: str) -> Any:
        return None

    async def on_menu(self, menu: Menu) -> Any:
        return None


# ---------------------------------------------------------------------------
# TextRenderer: streams lines to a terminal (or any text stream)
# ---------------------------------------------------------------------------

class TextRenderer(Renderer):
    """Writes dialogue as plain lines and presents menus as numbered lists.

    Character lines render as "Name: text". Narrator lines render without a
    name and, when `narrator.italicize` is set, in italics, unless
    `narrator.treat_as_character` asks for the regular character layout.
    Menu choices may be typed as the option number or the label itself.
    """

    def __init__(self, config: RendererConfig | Mapping[str, Any] | None = None) -> None:
        super().__init__()
        if config is None:
            config = RendererConfig()
        elif not isinstance(config, RendererConfig):
            config = RendererConfig.model_validate(config)
        self.config = config
        self.container = config.container or sys.stdout
        self.narrator = config.narrator
        self.classes = config.classes
        self._input = config.input_fn or read_input

    def _style(self, style: str, text: str) -> str:
        if not self.config.color or not style:
            return text
        codes = "".join(ANSI_STYLES.get(name, "") for name in style.split())
        if not codes:
            return text
        return f"{codes}{text}{ANSI_RESET}"

    def _emit(self, line: str) -> RenderedLine:
        self.container.write(line + "\n")
        flush = getattr(self.container, "flush", None)
        if flush is not None:
            flush()
        return RenderedLine(line)

    def on_narrator_message(self, text: str) -> RenderedLine:
        if self.narrator.italicize:
            text = self._style("italic", text) if self.config.color else f"*{text}*"
        return self._emit(self._style(self.classes.narrator, text))

    def on_message(self, character: Character, text: str) -> RenderedLine:
        if self.is_narrator(character) and not self.narrator.treat_as_character:
            return self.on_narrator_message(text)
        name = self._style(self.classes.name, character.name)
        return self._emit(f"{name}: {self._style(self.classes.message, text)}")

    async def on_menu(self, menu: Menu) -> Any:
        labels = list(menu)
        if not labels:
            logger.debug("empty menu, nothing to choose")
            return None

        for i, label in enumerate(labels, 1):
            self._emit(self._style(self.classes.menu, f"  {i}. ") + self._style(self.classes.button, label))

        while True:
            raw = str(await resolve(self._input("> "))).strip()
            label = _match_choice(raw, labels)
            if label is not None:
                logger.debug("menu choice %r", label)
                return await menu.choose(label)
            self._emit(f"Choose 1-{len(labels)} or type an option.")


def _match_choice(raw: str, labels: list[str]) -> str | None:
    if raw.isdecimal():
        index = int(raw) - 1
        if 0 <= index < len(labels):
            return labels[index]
        return None
    folded = raw.casefold()
    for label in labels:
        if label.casefold() == folded:
            return label
    return None


RENDERERS: dict[str, type[Renderer]] = {
    "text": TextRenderer,
    "silent": Renderer,
}


def select_renderer(value: Any) -> Renderer:
    """Turn the Story `renderer` option into a Renderer instance.

    Accepts a Renderer, None (default TextRenderer), or a RendererConfig /
    dict whose `type` names an entry of RENDERERS.
    """
    if isinstance(value, Renderer):
        return value
    if value is None:
        return TextRenderer()
    if not isinstance(value, (RendererConfig, Mapping)):
        raise InvalidRendererSelectionError(value, "expected a Renderer or a renderer config")

    try:
        config = value if isinstance(value, RendererConfig) else RendererConfig.model_validate(value)
    except ValidationError as e:
        raise InvalidRendererSelectionError(value, str(e)) from e

    renderer_cls = RENDERERS.get(config.type)
    if renderer_cls is None:
        raise InvalidRendererSelectionError(value, f"unknown renderer type {config.type!r}")
    if issubclass(renderer_cls, TextRenderer):
        return renderer_cls(config)
    return renderer_cls()
