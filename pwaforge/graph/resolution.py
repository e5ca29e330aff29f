"""Module-resolution rules for import specifiers.

Relative specifiers resolve against the importing file's directory.
Absolute specifiers (``/src/main.tsx``, ``/manifest.json``) resolve against
the project root, then ``public/``. Extensionless specifiers try the source
extensions in order, then a directory ``index`` file. Bare package names and
URLs are external and never enter the graph.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Container
from pathlib import PurePosixPath

from pwaforge.models import COMPONENTS_DIR, PAGES_DIR, Manifest

SOURCE_EXTENSIONS: tuple[str, ...] = (".tsx", ".ts", ".jsx", ".js")
FILE_EXTENSIONS: frozenset[str] = frozenset(
    SOURCE_EXTENSIONS
    + (".css", ".json", ".html", ".svg", ".png", ".jpg", ".jpeg", ".gif", ".webp", ".ico", ".txt")
)
PUBLIC_DIR = "public"

_URL = re.compile(r"^(?:[a-zA-Z][a-zA-Z0-9+.-]*:|//)")


def is_external(specifier: str) -> bool:
    """True for bare package specifiers (``react``, ``@stripe/stripe-js``) and URLs."""
    if _URL.match(specifier):
        return True
    return not specifier.startswith(("./", "../", "/")) and specifier not in (".", "..")


def _base_paths(source_path: str, specifier: str) -> list[str]:
    if specifier.startswith("/"):
        rooted = posixpath.normpath(specifier.lstrip("/"))
        return [rooted, f"{PUBLIC_DIR}/{rooted}"]
    return [posixpath.normpath(posixpath.join(posixpath.dirname(source_path), specifier))]


def _has_extension(path: str) -> bool:
    return PurePosixPath(path).suffix.lower() in FILE_EXTENSIONS


def candidate_paths(source_path: str, specifier: str) -> list[str]:
    """Every artifact path the specifier could refer to, in lookup order."""
    candidates: list[str] = []
    for base in _base_paths(source_path, specifier):
        if _has_extension(base):
            candidates.append(base)
            continue
        candidates.extend(f"{base}{ext}" for ext in SOURCE_EXTENSIONS)
        candidates.extend(f"{base}/index{ext}" for ext in SOURCE_EXTENSIONS)
    return list(dict.fromkeys(candidates))


def default_extension(path: str) -> str:
    """Extension a missing extensionless module is expected to have.

    Pages, components and PascalCase modules under ``src/`` are ``.tsx``;
    other ``src/`` modules are ``.ts``; anything else is ``.js``.
    """
    directory = posixpath.dirname(path)
    stem = PurePosixPath(path).name
    if directory.startswith((PAGES_DIR, COMPONENTS_DIR)):
        return ".tsx"
    if directory == "src" or directory.startswith("src/"):
        return ".tsx" if stem[:1].isupper() else ".ts"
    return ".js"


def expected_path(source_path: str, specifier: str) -> str:
    """Path a missing import target must be created at to satisfy the specifier."""
    if specifier.startswith("/"):
        rooted = posixpath.normpath(specifier.lstrip("/"))
        base = rooted if rooted.split("/", 1)[0] == "src" else f"{PUBLIC_DIR}/{rooted}"
    else:
        base = _base_paths(source_path, specifier)[0]
    if _has_extension(base):
        return base
    return base + default_extension(base)


def resolve_import(source_path: str, specifier: str, paths: Container[str]) -> tuple[str, bool]:
    """Resolve ``specifier`` imported from ``source_path``.

    Returns:
        ``(path, True)`` for the first existing candidate, otherwise
        ``(expected_path, False)``.
    """
    for candidate in candidate_paths(source_path, specifier):
        if candidate in paths:
            return candidate, True
    return expected_path(source_path, specifier), False


def paired_stylesheet(path: str) -> str:
    """``src/pages/Chat.tsx`` -> ``src/pages/Chat.css``."""
    return Manifest.style_path(Manifest.paired_style_id(path))
