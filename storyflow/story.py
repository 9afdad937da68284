"""Story: the flow controller.

Runs scenes and interprets what they return:

  None / NoNext()          → rest at the current scene
  "id" / GotoScene("id")   → on_scene_change(current, "id"), then run "id"
  {label: action} / Menu   → present it via the renderer, run the "_" entry,
                             then treat the chosen value like a scene id
  anything else            → InvalidSceneResultError through on_error

Scene chains are followed in a loop rather than by recursion, so long chains
do not grow the call stack. Avoiding endless chains is up to the author;
`max_transitions` puts an optional ceiling on one navigation run.

Failures are never raised by the controller directly. They go to the
on_error hook, which re-raises by default. A hook that returns instead turns
the failed step into a no-op and the story comes to rest.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import Counter
from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Literal

from storyflow.characters import UNKNOWN_NAME, Character, CharacterRegistry
from storyflow.config import CharacterConfig, NarratorConfig
from storyflow.errors import (
    InvalidMenuResultError,
    InvalidRendererSelectionError,
    InvalidSceneResultError,
    MissingSceneError,
    NavigationLimitError,
    StoryError,
)
from storyflow.menu import Menu, resolve
from storyflow.renderer import Renderer, select_renderer
from storyflow.scenes import GotoScene, NoNext, SceneLogic, SceneRegistry, to_transition

logger = logging.getLogger(__name__)

StoryState = Literal["idle", "running", "finished", "errored"]

SceneChangeHook = Callable[[str | None, str], Awaitable[None] | None]
FinishHook = Callable[[], Awaitable[None] | None]
ErrorHook = Callable[[StoryError], Awaitable[None] | None]


def _escalate(error: StoryError) -> None:
    raise error


class Story:
    """One running story: its registries, shared data, renderer and hooks."""

    NARRATOR_ID = "n"
    START_SCENE = "start"

    def __init__(
        self,
        *,
        renderer: Renderer | Mapping[str, Any] | None = None,
        narrator: Mapping[str, Any] | None = None,
        characters: Mapping[str, Mapping[str, Any]] | None = None,
        scenes: Mapping[str, SceneLogic] | None = None,
        on_scene_change: SceneChangeHook | None = None,
        on_finish: FinishHook | None = None,
        on_error: ErrorHook | None = None,
        max_transitions: int | None = None,
    ) -> None:
        self.characters = CharacterRegistry(self)
        self.scenes = SceneRegistry()
        self.data: dict[str, Any] = {}

        self.on_scene_change = on_scene_change
        self.on_finish = on_finish
        self.on_error: ErrorHook = on_error or _escalate

        self.state: StoryState = "idle"
        self.current_scene: str | None = None
        self.visits: Counter[str] = Counter()
        self.transitions = 0
        self.max_transitions = max_transitions
        self._depth = 0

        self.renderer = self._select_renderer(renderer)
        self.renderer.attach(self)

        narrator_config = NarratorConfig.model_validate(narrator or {})
        self.narrator = self.character(self.NARRATOR_ID, narrator_config.name, narrator_config.data)

        for id, config in (characters or {}).items():
            character_config = CharacterConfig.model_validate(config)
            self.character(id, character_config.name, character_config.data)

        for id, logic in (scenes or {}).items():
            self.scene(id, logic)

    def _select_renderer(self, value: Any) -> Renderer:
        """Resolve the renderer option; falls back to a silent Renderer when
        on_error swallows an invalid selection.

        Runs during __init__, so on_error is called synchronously here.
        """
        try:
            return select_renderer(value)
        except InvalidRendererSelectionError as e:
            logger.warning("story error: %s", e)
            result = self.on_error(e)
            if inspect.iscoroutine(result):
                logger.warning("async on_error hook cannot run during construction")
                result.close()
            return Renderer()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def scene(self, id: str, logic: SceneLogic | None = None) -> Any:
        """Create/overwrite a scene. Without `logic`, works as a decorator."""
        if logic is None:
            return self.scenes.scene(id)
        self.scenes.register(id, logic)
        return logic

    def character(
        self,
        id: str,
        name: str = UNKNOWN_NAME,
        data: dict[str, Any] | None = None,
    ) -> Character:
        """Create/overwrite a character."""
        return self.characters.register(id, name, data)

    # ------------------------------------------------------------------
    # Flow
    # ------------------------------------------------------------------

    async def call(self, scene_id: str) -> Any:
        """Run a scene and return its raw result without navigating.

        Useful for logic scenes. A missing scene is reported through
        on_error and yields None.
        """
        logic = self.scenes.get(scene_id)
        if logic is None:
            await self._report(MissingSceneError(scene_id))
            return None
        self.visits[scene_id] += 1
        return await resolve(logic(self.characters.speakers(), self.data))

    async def goto(self, scene_id: str) -> None:
        """Navigate to a scene and keep following transitions until rest."""
        if self._depth == 0:
            self.transitions = 0
        self._depth += 1
        try:
            await self._navigate(scene_id)
        finally:
            self._depth -= 1

    async def _navigate(self, scene_id: str) -> None:
        current = scene_id
        while True:
            logger.debug("goto scene=%s", current)
            self.current_scene = current
            result = await self.call(current)
            transition = to_transition(result)

            if transition is None:
                await self._report(InvalidSceneResultError(current, result))
                return
            if isinstance(transition, NoNext):
                return
            if isinstance(transition, GotoScene):
                target = transition.scene_id
            else:
                target = await self._choose(transition.menu)
                if target is None:
                    return

            if not await self._change_scene(current, target):
                return
            current = target

    async def menu(self, options: Menu | Mapping[str, Any]) -> None:
        """Prompt the player with a menu and follow the chosen option."""
        source = self.current_scene
        target = await self._choose(Menu.from_value(options))
        if target is not None and await self._change_scene(source, target):
            await self.goto(target)

    async def _choose(self, menu: Menu) -> str | None:
        """Present a menu and return the scene id it resolved to, if any.

        The "_" entry runs once the renderer resolves and before the chosen
        value is looked at.
        """
        logger.debug("menu options=%s", list(menu))
        value = await resolve(self.renderer.on_menu(menu))
        await menu.run_always()

        if isinstance(value, GotoScene):
            return value.scene_id
        if isinstance(value, str):
            return value
        if value is None or isinstance(value, NoNext):
            return None
        await self._report(InvalidMenuResultError(value))
        return None

    async def _change_scene(self, source: str | None, target: str) -> bool:
        if self.max_transitions is not None and self.transitions >= self.max_transitions:
            await self._report(NavigationLimitError(self.max_transitions, target))
            return False
        self.transitions += 1
        logger.debug("scene change %s -> %s", source, target)
        if self.on_scene_change is not None:
            await resolve(self.on_scene_change(source, target))
        return True

    async def _report(self, error: StoryError) -> None:
        logger.warning("story error: %s", error)
        await resolve(self.on_error(error))

    async def start(self) -> None:
        """Navigate to the "start" scene and fire on_finish once it settles."""
        self.state = "running"
        try:
            await self.goto(self.START_SCENE)
        except Exception:
            self.state = "errored"
            raise
        self.state = "finished"
        if self.on_finish is not None:
            await resolve(self.on_finish())

    def run(self) -> None:
        """Blocking entry point: start the story on a fresh event loop."""
        asyncio.run(self.start())
