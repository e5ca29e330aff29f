"""Targeted stylesheet scanning for class selectors.

Not a CSS parser: comments and quoted strings are blanked, then every rule
prelude (the text before a ``{``) is searched for ``.class`` tokens. This
covers plain rules, comma-grouped selector lists, compound and descendant
selectors, and rules nested inside ``@media`` blocks.
"""

from __future__ import annotations

import re

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)
_STRING = re.compile(r"\"(?:[^\"\\\n]|\\.)*\"|'(?:[^'\\\n]|\\.)*'")
_PRELUDE = re.compile(r"([^{}]+)\{")
_CLASS_TOKEN = re.compile(r"\.(-?[A-Za-z_][\w-]*)")


def scan_selectors(css: str) -> frozenset[str]:
    """Return every class name that some rule in ``css`` selects on."""
    text = _STRING.sub('""', _COMMENT.sub(" ", css))
    classes: set[str] = set()
    for match in _PRELUDE.finditer(text):
        prelude = match.group(1).rsplit(";", 1)[-1].strip()
        if not prelude or prelude.startswith("@"):
            continue
        classes.update(_CLASS_TOKEN.findall(prelude))
    return frozenset(classes)


def selector_rule(class_name: str) -> str:
    """Minimal rule that makes ``class_name`` a defined selector."""
    return f".{class_name} {{\n}}\n"
