"""Tests for storyflow.renderer: base contract, TextRenderer, selection."""

import io

import pytest

from storyflow import (
    InvalidRendererSelectionError,
    Menu,
    Renderer,
    RendererAttachedError,
    RendererConfig,
    Story,
    TextRenderer,
    select_renderer,
)
from storyflow.renderer import ANSI_RESET, ANSI_STYLES, RenderedLine


def _text_story(inputs=(), **config) -> tuple[Story, io.StringIO]:
    out = io.StringIO()
    answers = iter(inputs)

    async def fake_input(prompt: str) -> str:
        return next(answers)

    config.setdefault("color", False)
    renderer = TextRenderer({"container": out, "input_fn": fake_input, **config})
    return Story(renderer=renderer), out


# ---------------------------------------------------------------------------
# Renderer base
# ---------------------------------------------------------------------------

class TestRendererBase:
    async def test_defaults_produce_nothing(self) -> None:
        story = Story(renderer=Renderer())
        assert story.renderer.on_message(story.narrator, "x") is None
        assert await story.renderer.on_menu(Menu({"A": "a"})) is None

    def test_attached_at_construction(self) -> None:
        renderer = Renderer()
        story = Story(renderer=renderer)
        assert renderer.story is story
        assert story.renderer is renderer

    def test_cannot_serve_two_stories(self) -> None:
        renderer = Renderer()
        Story(renderer=renderer)
        with pytest.raises(RendererAttachedError):
            Story(renderer=renderer)

    def test_reattach_same_story_is_noop(self) -> None:
        renderer = Renderer()
        story = Story(renderer=renderer)
        renderer.attach(story)
        assert renderer.story is story

    def test_is_narrator(self) -> None:
        story = Story(renderer=Renderer())
        npc = story.character("b", "Brunolf")
        assert story.renderer.is_narrator(story.narrator)
        assert not story.renderer.is_narrator(npc)

    def test_is_narrator_compares_ids(self) -> None:
        story = Story(renderer=Renderer())
        replacement = story.character("n", "Voice")
        assert story.renderer.is_narrator(replacement)


# ---------------------------------------------------------------------------
# TextRenderer
# ---------------------------------------------------------------------------

class TestTextRendererMessages:
    def test_character_line(self) -> None:
        story, out = _text_story()
        story.character("b", "Brunolf").say("Rough night?")
        assert out.getvalue() == "Brunolf: Rough night?\n"

    def test_say_returns_rendered_line(self) -> None:
        story, _ = _text_story()
        assert story.character("b", "Brunolf").say("Hi.") == RenderedLine("Brunolf: Hi.")

    def test_narrator_italicized_without_color(self) -> None:
        story, out = _text_story()
        story.narrator.say("Rain falls.")
        assert out.getvalue() == "*Rain falls.*\n"

    def test_narrator_plain_when_not_italicized(self) -> None:
        story, out = _text_story(narrator={"italicize": False})
        story.narrator.say("Rain falls.")
        assert out.getvalue() == "Rain falls.\n"

    def test_narrator_treated_as_character(self) -> None:
        story, out = _text_story(narrator={"treatAsCharacter": True})
        story.narrator.say("Rain falls.")
        assert out.getvalue() == "Narrator: Rain falls.\n"

    def test_color_styles(self) -> None:
        story, out = _text_story(color=True, classes={"name": "bold red"})
        story.character("b", "Brunolf").say("Hi.")
        expected_name = f"{ANSI_STYLES['bold']}{ANSI_STYLES['red']}Brunolf{ANSI_RESET}"
        assert out.getvalue() == f"{expected_name}: Hi.\n"

    def test_color_narrator_uses_ansi_italic(self) -> None:
        story, out = _text_story(color=True, classes={"narrator": ""})
        story.narrator.say("Rain.")
        assert out.getvalue() == f"{ANSI_STYLES['italic']}Rain.{ANSI_RESET}\n"

    def test_unknown_style_ignored(self) -> None:
        story, out = _text_story(color=True, classes={"name": "sparkly"})
        story.character("b", "Brunolf").say("Hi.")
        assert out.getvalue() == "Brunolf: Hi.\n"

    def test_defaults_to_stdout(self, capsys) -> None:
        story = Story(renderer=TextRenderer({"color": False}))
        story.character("b", "Brunolf").say("Hi.")
        assert capsys.readouterr().out == "Brunolf: Hi.\n"


class TestTextRendererMenus:
    async def test_numbered_options_listed(self) -> None:
        story, out = _text_story(inputs=["1"])
        await story.renderer.on_menu(Menu({"Stay": "inn", "Go": "road"}))
        assert "  1. Stay\n  2. Go\n" in out.getvalue()

    async def test_choice_by_number(self) -> None:
        story, _ = _text_story(inputs=["2"])
        assert await story.renderer.on_menu(Menu({"Stay": "inn", "Go": "road"})) == "road"

    async def test_choice_by_label_case_insensitive(self) -> None:
        story, _ = _text_story(inputs=["stay"])
        assert await story.renderer.on_menu(Menu({"Stay": "inn", "Go": "road"})) == "inn"

    async def test_invalid_input_reprompts(self) -> None:
        story, out = _text_story(inputs=["9", "dance", "1"])
        result = await story.renderer.on_menu(Menu({"Stay": "inn", "Go": "road"}))
        assert result == "inn"
        assert out.getvalue().count("Choose 1-2") == 2

    async def test_non_ascii_digit_reprompts(self) -> None:
        story, out = _text_story(inputs=["\u00b2", "1"])
        result = await story.renderer.on_menu(Menu({"Stay": "inn", "Go": "road"}))
        assert result == "inn"
        assert out.getvalue().count("Choose 1-2") == 1

    async def test_action_called_once(self) -> None:
        calls: list[str] = []
        story, _ = _text_story(inputs=["1"])
        result = await story.renderer.on_menu(Menu({"Drink": lambda: calls.append("x") or "bar"}))
        assert result == "bar"
        assert calls == ["x"]

    async def test_empty_menu_resolves_to_none(self) -> None:
        story, _ = _text_story()
        assert await story.renderer.on_menu(Menu({})) is None

    async def test_sync_input_fn(self) -> None:
        out = io.StringIO()
        renderer = TextRenderer(RendererConfig(container=out, color=False, input_fn=lambda prompt: "1"))
        Story(renderer=renderer)
        assert await renderer.on_menu(Menu({"Only": "x"})) == "x"

    async def test_scene_ending_on_a_line_comes_to_rest(self) -> None:
        on_finish_calls: list[str] = []
        story, out = _text_story()
        story.on_finish = lambda: on_finish_calls.append("done")
        story.character("b", "Brunolf")
        story.scene("start", lambda c, d: c["b"]("Farewell."))

        await story.start()

        assert out.getvalue() == "Brunolf: Farewell.\n"
        assert story.state == "finished"
        assert on_finish_calls == ["done"]

    async def test_full_story_in_text(self) -> None:
        story, out = _text_story(inputs=["2"])
        story.character("b", "Brunolf")

        def start(c, d):
            c["n"]("The inn is warm.")
            c["b"]("Stay or go?")
            return {"Stay": "stay", "Go": "go"}

        story.scene("start", start)
        story.scene("stay", lambda c, d: c["b"]("Good."))
        story.scene("go", lambda c, d: c["b"]("Farewell."))

        await story.start()

        assert out.getvalue() == (
            "*The inn is warm.*\n"
            "Brunolf: Stay or go?\n"
            "  1. Stay\n"
            "  2. Go\n"
            "Brunolf: Farewell.\n"
        )


# ---------------------------------------------------------------------------
# select_renderer / Story(renderer=...)
# ---------------------------------------------------------------------------

class TestSelectRenderer:
    def test_instance_passes_through(self) -> None:
        renderer = Renderer()
        assert select_renderer(renderer) is renderer

    def test_none_builds_text_renderer(self) -> None:
        assert isinstance(select_renderer(None), TextRenderer)

    def test_config_dict_builds_text_renderer(self) -> None:
        out = io.StringIO()
        renderer = select_renderer({"container": out, "narrator": {"italicize": False}})
        assert isinstance(renderer, TextRenderer)
        assert renderer.container is out
        assert renderer.narrator.italicize is False

    def test_config_model(self) -> None:
        renderer = select_renderer(RendererConfig(color=False))
        assert isinstance(renderer, TextRenderer)
        assert renderer.config.color is False

    def test_named_silent_type(self) -> None:
        renderer = select_renderer({"type": "silent"})
        assert type(renderer) is Renderer

    def test_unknown_type(self) -> None:
        with pytest.raises(InvalidRendererSelectionError, match="unknown renderer type"):
            select_renderer({"type": "html"})

    def test_unknown_option(self) -> None:
        with pytest.raises(InvalidRendererSelectionError):
            select_renderer({"colour": False})

    def test_wrong_kind_of_value(self) -> None:
        with pytest.raises(InvalidRendererSelectionError):
            select_renderer("text")

    def test_story_default_hook_escalates(self) -> None:
        with pytest.raises(InvalidRendererSelectionError):
            Story(renderer=42)

    def test_story_swallowing_hook_falls_back_to_silent(self) -> None:
        errors: list = []
        story = Story(renderer=42, on_error=errors.append)
        assert type(story.renderer) is Renderer
        assert story.renderer.story is story
        assert isinstance(errors[0], InvalidRendererSelectionError)
        assert errors[0].value == 42
