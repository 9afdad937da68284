"""Dialogue line interpolation for Character.say().

Lines are Handlebars templates rendered by pybars:

    c["b"]("{{char.name}} has poured {{count}} {{plural count 'ale' 'ales'}}.", count=2)

Dialogue goes to terminals and other plain-text sinks, so values are
inserted as-is: `{{name}}` behaves like `{{{name}}}` and nothing is
HTML-escaped.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pybars

_compiler = pybars.Compiler()
_compiled_lines: dict[str, Callable] = {}


class TemplateError(Exception):
    """A dialogue line failed to compile or render."""


def _raw(value: Any) -> Any:
    # pybars escapes every plain str it inserts but passes strlist through.
    # Empty strings stay plain so {{#if}} and {{default}} still see them as empty.
    if isinstance(value, str):
        return pybars.strlist([value]) if value else value
    if isinstance(value, Mapping):
        return {key: _raw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_raw(item) for item in value]
    return value


def _helper_default(this, value, fallback=""):
    """{{default value "fallback"}}: fallback when value is missing or empty."""
    if value is None or value == "":
        return _raw(fallback)
    return value


def _helper_plural(this, count, singular, plural):
    """{{plural count "ale" "ales"}}"""
    return _raw(singular if count == 1 else plural)


_HELPERS: dict[str, Callable] = {
    "default": _helper_default,
    "plural": _helper_plural,
}


def render_line(line: str, context: dict[str, Any]) -> str:
    """Interpolate one line of dialogue.

    Lines without a `{{` expression come back untouched.
    """
    if "{{" not in line:
        return line
    try:
        compiled = _compiled_lines.get(line)
        if compiled is None:
            compiled = _compiler.compile(line)
            _compiled_lines[line] = compiled
        return str(compiled(_raw(context), helpers=_HELPERS))
    except Exception as e:
        raise TemplateError(f"could not render line {line!r}: {e}") from e


def line_context(character: Any, story_data: dict[str, Any], values: dict[str, Any]) -> dict[str, Any]:
    """Template variables for one line spoken by `character`.

    `char` holds the speaker's data plus its id and name, `data` the shared
    story bag. Keyword values passed to say() win over both.
    """
    char = dict(character.data)
    char["id"] = character.id
    char["name"] = character.name
    ctx: dict[str, Any] = {"char": char, "data": story_data}
    ctx.update(values)
    return ctx
