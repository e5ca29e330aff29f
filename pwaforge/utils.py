"""Shared utility functions for pwaforge.

Provides name helpers, JSON and file I/O, and Rich-based console reporting.
Every public function is side-effect-free apart from the explicit I/O helpers.
"""

from __future__ import annotations

import asyncio
import json
import re
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# String / name helpers
# ---------------------------------------------------------------------------


def slugify(text: str) -> str:
    """Convert text to a URL/package-safe slug (hyphenated).

    Examples::

        slugify("Bella Vista Bistro") -> "bella-vista-bistro"
        slugify("  My PWA!  ") -> "my-pwa"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower().strip())
    return slug.strip("-")


def to_pascal(name: str) -> str:
    """Convert ``some-thing`` or ``some_thing`` to ``SomeThing``."""
    parts = re.split(r"[-_\s/]+", name)
    return "".join(word[:1].upper() + word[1:] for word in parts if word)


def to_kebab(name: str) -> str:
    """Convert ``SomeThing`` or ``some_thing`` to ``some-thing``."""
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "-", name)
    return slugify(spaced)


def label_from_route(route_path: str) -> str:
    """Derive a human-readable navigation label from a route path.

    Examples::

        label_from_route("/") -> "Home"
        label_from_route("/contact-us") -> "Contact Us"
        label_from_route("/shop/gift_cards") -> "Gift Cards"
    """
    segment = route_path.strip("/").split("/")[-1]
    if not segment:
        return "Home"
    words = re.split(r"[-_\s]+", segment)
    return " ".join(w.capitalize() for w in words if w)


def component_name_from_route(route_path: str) -> str:
    """Derive a page component identifier from a route path (``/contact-us`` -> ``ContactUs``)."""
    return label_from_route(route_path).replace(" ", "")


# ---------------------------------------------------------------------------
# File / JSON I/O
# ---------------------------------------------------------------------------


def write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def load_json(path: str | Path) -> Any:
    """Load and parse a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    raw = Path(path).read_text(encoding="utf-8")
    return json.loads(raw)


async def save_json(data: dict[str, Any] | list[Any], path: str | Path) -> None:
    """Save data as pretty-printed JSON.

    Parent directories are created automatically and the write happens in a
    worker thread so the event loop is not blocked.
    """
    file_path = Path(path)
    content = json.dumps(data, indent=2, ensure_ascii=False, default=str)
    await asyncio.to_thread(write_file, file_path, content)


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
