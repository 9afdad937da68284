"""Construction-time configuration models.

Pydantic validates every option a Story accepts from plain dicts. Both the
snake_case field names and the camelCase spellings are accepted, so
{"narrator": {"treatAsCharacter": True}} and
{"narrator": {"treat_as_character": True}} are equivalent.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from storyflow.characters import UNKNOWN_NAME

DEFAULT_NARRATOR_NAME = "Narrator"


class NarratorDisplay(BaseModel):
    """How a renderer presents narrator lines."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    treat_as_character: bool = Field(default=False, alias="treatAsCharacter")
    italicize: bool = True


class RendererClasses(BaseModel):
    """Style names applied to each rendered element."""

    model_config = ConfigDict(extra="forbid")

    name: str = "bold"
    message: str = ""
    menu: str = ""
    button: str = "cyan"
    narrator: str = "dim"


class RendererConfig(BaseModel):
    """Options for building one of the built-in renderers.

    `type` names an entry of storyflow.renderer.RENDERERS. `container` is
    the text stream written to (stdout when unset) and `input_fn` an
    optional async callable `(prompt) -> str` used to read menu choices.
    """

    model_config = ConfigDict(
        populate_by_name=True, arbitrary_types_allowed=True, extra="forbid",
    )

    type: str = "text"
    container: Any = None
    color: bool = True
    input_fn: Any = Field(default=None, alias="inputFn")
    narrator: NarratorDisplay = Field(default_factory=NarratorDisplay)
    classes: RendererClasses = Field(default_factory=RendererClasses)


class CharacterConfig(BaseModel):
    """`{"name": ..., **data}`: every key other than name is character data."""

    model_config = ConfigDict(extra="allow")

    name: str = UNKNOWN_NAME

    @property
    def data(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class NarratorConfig(CharacterConfig):
    name: str = DEFAULT_NARRATOR_NAME
