"""Remove TypeScript from Svelte components.

Three passes: drop ``lang``/``generics`` from ``<script>`` tags, strip the
script bodies with :func:`strip_types`, and clean the few typed constructs
Svelte allows in markup (``{#snippet}``, ``{@const}`` and inline event
handlers).  Everything else in the markup is passed through unmodified.
"""

from __future__ import annotations

import re

from .strip_types import strip_types

# Quote-aware so attribute values may contain ``>``.
_TAG_BODY = r"""(?:[^>"']|"[^"]*"|'[^']*')*"""
SCRIPT_OPEN = re.compile(r"<script\b" + _TAG_BODY + ">", re.IGNORECASE)
SCRIPT_BLOCK = re.compile(
    r"(<script\b" + _TAG_BODY + r">)(.*?)(</script\s*>)", re.IGNORECASE | re.DOTALL
)
SCRIPT_OR_STYLE = re.compile(
    r"<(script|style)\b" + _TAG_BODY + r">.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)

STRIPPED_ATTRIBUTES = ("lang", "generics")

SNIPPET = re.compile(r"\{#snippet\s+([^(}]+)\(([^)]*)\)\s*\}")
CONST_TAG = re.compile(r"\{@const\s+([^:=}]+?)\s*:\s*[^=}]+=\s*([^}]+)\}")
EVENT_HANDLER = re.compile(r"on(\w+)=\{\s*\(([^)]*)\)(\s*:\s*[^=]*?)?\s*=>\s*([^}]*)\}")

AS_CAST = re.compile(r"\s+as\s+[A-Za-z0-9_<>|&\[\]]+")


def _attribute_patterns(attribute: str) -> tuple[re.Pattern[str], ...]:
    name = re.escape(attribute)
    return (
        re.compile(r'\s+' + name + r'\s*=\s*"[^"]*"', re.IGNORECASE),
        re.compile(r"\s+" + name + r"\s*=\s*'[^']*'", re.IGNORECASE),
        re.compile(r"\s+" + name + r"""\s*=\s*[^\s>"']+""", re.IGNORECASE),
    )


_ATTRIBUTE_PATTERNS = {name: _attribute_patterns(name) for name in STRIPPED_ATTRIBUTES}


def remove_script_attributes(source: str, attributes: tuple[str, ...] = STRIPPED_ATTRIBUTES) -> str:
    """Drop *attributes* from every ``<script>`` opening tag.

    Double-quoted, single-quoted and unquoted values are tried in that order;
    the other attributes of the tag are kept as written.
    """

    def _clean(match: re.Match[str]) -> str:
        tag = match.group(0)
        for attribute in attributes:
            patterns = _ATTRIBUTE_PATTERNS.get(attribute) or _attribute_patterns(attribute)
            for pattern in patterns:
                tag = pattern.sub("", tag)
        return tag

    return SCRIPT_OPEN.sub(_clean, source)


def strip_script_blocks(source: str) -> str:
    """Run :func:`strip_types` over the body of every ``<script>`` block."""
    return SCRIPT_BLOCK.sub(
        lambda match: match.group(1) + strip_types(match.group(2)) + match.group(3),
        source,
    )


_PARAMS_HEAD = "function _("
_PARAMS_TAIL = ") {}"


def _strip_params(params: str) -> str:
    """Strip a markup parameter list by stripping it as a function's parameters."""
    stripped = strip_types(_PARAMS_HEAD + params + _PARAMS_TAIL)
    return stripped[len(_PARAMS_HEAD):-len(_PARAMS_TAIL)]


def _snippet(match: re.Match[str]) -> str:
    text = match.group(0)
    start, end = match.start(2) - match.start(), match.end(2) - match.start()
    return text[:start] + _strip_params(match.group(2)) + text[end:]


def _const_tag(match: re.Match[str]) -> str:
    name = match.group(1).strip()
    expression = AS_CAST.sub("", match.group(2))
    return f"{{@const {name} = {expression}}}"


def _event_handler(match: re.Match[str]) -> str:
    event, params, return_type, body = match.groups()
    if ":" not in params and not return_type:
        return match.group(0)
    return f"on{event}={{({_strip_params(params)}) => {AS_CAST.sub('', body)}}}"


def strip_markup_types(markup: str) -> str:
    """Clean typed snippet, ``{@const}`` and event-handler syntax in *markup*."""
    markup = SNIPPET.sub(_snippet, markup)
    markup = CONST_TAG.sub(_const_tag, markup)
    return EVENT_HANDLER.sub(_event_handler, markup)


def _outside_blocks(source: str) -> str:
    pieces: list[str] = []
    cursor = 0
    for block in SCRIPT_OR_STYLE.finditer(source):
        pieces.append(strip_markup_types(source[cursor:block.start()]))
        pieces.append(block.group(0))
        cursor = block.end()
    pieces.append(strip_markup_types(source[cursor:]))
    return "".join(pieces)


def strip_svelte_types(source: str) -> str:
    """Return the untyped version of a Svelte component."""
    source = remove_script_attributes(source)
    source = strip_script_blocks(source)
    return _outside_blocks(source)
