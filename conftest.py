import pytest

from storyflow.renderer import Renderer


class ScriptedRenderer(Renderer):
    """Records every line and answers menus from a list of labels.

    When the script runs out, menus resolve to None.
    """

    def __init__(self, choices=()):
        super().__init__()
        self.choices = list(choices)
        self.messages: list[tuple[str, str]] = []
        self.menus: list[list[str]] = []

    def on_message(self, character, text):
        self.messages.append((character.id, text))

    async def on_menu(self, menu):
        self.menus.append(list(menu))
        if not self.choices:
            return None
        return await menu.choose(self.choices.pop(0))


@pytest.fixture
def renderer() -> ScriptedRenderer:
    return ScriptedRenderer()


@pytest.fixture
def errors() -> list:
    """Collects errors passed to a non-escalating on_error hook (use errors.append)."""
    return []
