"""Narrative flow engine.

A Story owns named scenes and speaking characters. Scenes are small (sync or
async) functions returning the next scene id, a menu, or nothing:

    story = Story(characters={"b": {"name": "Brunolf", "trust": 0}})

    @story.scene("start")
    def start(c, data):
        c["n"]("The tavern door creaks open.")
        c["b"]("Rough night?")
        return {"Nod": "bar", "Leave": "road"}

    story.run()

Presentation is delegated to a Renderer (TextRenderer by default).
"""

from .characters import Character, CharacterRegistry, Speaker  # noqa: F401
from .config import (  # noqa: F401
    CharacterConfig,
    NarratorConfig,
    NarratorDisplay,
    RendererClasses,
    RendererConfig,
)
from .errors import (  # noqa: F401
    InvalidMenuResultError,
    InvalidRendererSelectionError,
    InvalidSceneResultError,
    MissingSceneError,
    NavigationLimitError,
    RendererAttachedError,
    StoryError,
)
from .menu import ALWAYS_KEY, Menu  # noqa: F401
from .renderer import RENDERERS, RenderedLine, Renderer, TextRenderer, select_renderer  # noqa: F401
from .scenes import GotoScene, NoNext, SceneRegistry, ShowMenu, to_transition  # noqa: F401
from .story import Story  # noqa: F401
from .templates import TemplateError, render_line  # noqa: F401
