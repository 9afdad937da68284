"""Demo story used by the dev launcher and the playthrough tests."""

from __future__ import annotations

from typing import Any

from storyflow.renderer import Renderer
from storyflow.story import Story

DEMO_CHARACTERS: dict[str, dict[str, Any]] = {
    "b": {"name": "Brunolf", "trust": 0},
    "s": {"name": "Hooded Stranger", "met": False},
}


def _start(c, data):
    data["rounds"] = 0
    c["n"]("Rain hammers the shutters of the Crossroads Inn.")
    return "inn"


def _inn(c, data):
    c["b"]("What will it be, traveller?")

    def order_ale():
        c["b"].data["trust"] += 1
        return "bar"

    def count_round():
        data["rounds"] += 1

    options: dict[str, Any] = {
        "Order an ale": order_ale,
        "Talk to the stranger": "stranger",
        "Step back into the rain": "road",
        "_": count_round,
    }
    return options


def _bar(c, data):
    c["n"]("{{name}} slides a foaming mug across the counter.", name=str(c["b"]))
    if c["b"].data["trust"] >= 2:
        c["b"]("You look like someone who can keep a secret. Ask the stranger about the ferry.")
    return "inn"


async def _stranger(c, data):
    stranger = c["s"]
    if not stranger.data["met"]:
        stranger.data["met"] = True
        stranger("Sit, if you must.")
        if c["b"].data["trust"] >= 2:
            stranger.character.name = "Maren"
            stranger("Brunolf trusts you. Call me {{char.name}}. The ferry leaves at dawn.")
            data["ferry"] = True
            return "road"
    else:
        stranger("Still here?")
    return {
        "Leave the stranger be": "inn",
        "Leave the inn": "road",
    }


def _road(c, data):
    if data.get("ferry"):
        c["n"]("At dawn the ferry carries you east, away from the crossroads.")
    else:
        c["n"]("You walk on into the storm. The inn's lights fade behind you.")


DEMO_SCENES = {
    "start": _start,
    "inn": _inn,
    "bar": _bar,
    "stranger": _stranger,
    "road": _road,
}


def build_demo_story(renderer: Renderer | dict[str, Any] | None = None, **options: Any) -> Story:
    """Build a fresh Crossroads Inn story. Extra options go to Story()."""
    return Story(
        renderer=renderer,
        characters={id: dict(config) for id, config in DEMO_CHARACTERS.items()},
        scenes=DEMO_SCENES,
        **options,
    )
