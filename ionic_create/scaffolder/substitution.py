"""``{{ key }}`` placeholder substitution.

All keys are matched by a single compiled alternation and replaced in one
``re.sub`` pass, so a replacement value is never scanned again.  Placeholders
whose key is not in the mapping are left exactly as written, which lets a
later pass fill them in once more values are known.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([A-Za-z_$][\w$.-]*)\s*\}\}")


def stringify(value: object) -> str:
    """Render a value the way the JavaScript templates expect it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def substitute(content: str, variables: Mapping[str, object] | None) -> str:
    """Replace every ``{{ key }}`` in *content* whose key is in *variables*.

    Matching is case-sensitive and allows whitespace inside the braces.

    Raises:
        ValueError: If any key is empty.
    """
    if not variables:
        return content

    if any(not key for key in variables):
        raise ValueError("Substitution keys must be non-empty strings")

    values = {key: stringify(value) for key, value in variables.items()}
    # Longest first so that no key shadows another that extends it.
    alternation = "|".join(re.escape(key) for key in sorted(values, key=len, reverse=True))
    pattern = re.compile(r"\{\{\s*(" + alternation + r")\s*\}\}")
    return pattern.sub(lambda match: values[match.group(1)], content)


def find_placeholders(content: str) -> list[str]:
    """Return the distinct placeholder keys still present in *content*."""
    seen: dict[str, None] = {}
    for match in PLACEHOLDER_PATTERN.finditer(content):
        seen.setdefault(match.group(1), None)
    return list(seen)
