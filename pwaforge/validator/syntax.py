"""Lightweight syntax checks and the deterministic transforms that fix them.

These are targeted scanners, not parsers. String literals and comments are
first masked out (replaced by spaces with offsets and newlines preserved),
then the masked text is checked for:

- unbalanced ``{}`` delimiters (TSX/TS/JSX/JS/CSS),
- unquoted attribute values inside tags (TSX/JSX/HTML),
- invalid JSON (``.json``).
"""

from __future__ import annotations

import json
import re
from pathlib import PurePosixPath
from typing import Optional

from pydantic import BaseModel, Field

UNBALANCED_DELIMITER = "unbalanced-delimiter"
UNQUOTED_ATTRIBUTE = "unquoted-attribute"
INVALID_JSON = "invalid-json"

SCRIPT_SUFFIXES = frozenset({".tsx", ".ts", ".jsx", ".js"})
MARKUP_SUFFIXES = frozenset({".tsx", ".jsx", ".html"})


# ---------------------------------------------------------------------------
# Data Models
# ---------------------------------------------------------------------------

class SyntaxIssue(BaseModel):
    """A single syntax problem found in one artifact."""

    code: str = Field(..., description="unbalanced-delimiter, unquoted-attribute or invalid-json")
    message: str
    line: int = Field(default=1, ge=1)


class BraceBalance(BaseModel):
    """Result of counting ``{}`` outside literals and comments."""

    unclosed: int = Field(default=0, ge=0, description="Open braces never closed")
    unmatched_closers: list[int] = Field(
        default_factory=list, description="Offsets of closers with no opener"
    )

    @property
    def balanced(self) -> bool:
        return self.unclosed == 0 and not self.unmatched_closers


class AttributeSpan(BaseModel):
    """An unquoted attribute value, by offset into the original text."""

    name: str
    start: int
    end: int


# ---------------------------------------------------------------------------
# Masking
# ---------------------------------------------------------------------------

def mask_literals(text: str, *, line_comments: bool = True) -> str:
    """Blank out string literals and comments, keeping quotes, offsets and newlines.

    An unterminated ``'``/``"`` string ends at the end of its line.
    """
    out = list(text)
    i, n = 0, len(text)

    def blank(start: int, end: int) -> None:
        for k in range(start, end):
            if out[k] != "\n":
                out[k] = " "

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""
        if ch == "/" and nxt == "*":
            end = text.find("*/", i + 2)
            end = n if end == -1 else end + 2
            blank(i, end)
            i = end
        elif line_comments and ch == "/" and nxt == "/":
            end = text.find("\n", i)
            end = n if end == -1 else end
            blank(i, end)
            i = end
        elif ch in "'\"`":
            j = i + 1
            while j < n:
                if text[j] == "\\":
                    j += 2
                    continue
                if text[j] == ch or (ch != "`" and text[j] == "\n"):
                    break
                j += 1
            closed = j < n and text[j] == ch
            blank(i + 1, min(j, n))
            i = j + 1 if closed else j
        else:
            i += 1
    return "".join(out)


def _line_of(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


# ---------------------------------------------------------------------------
# Braces
# ---------------------------------------------------------------------------

def brace_balance(text: str, *, line_comments: bool = True) -> BraceBalance:
    masked = mask_literals(text, line_comments=line_comments)
    depth = 0
    unmatched: list[int] = []
    for offset, ch in enumerate(masked):
        if ch == "{":
            depth += 1
        elif ch == "}":
            if depth == 0:
                unmatched.append(offset)
            else:
                depth -= 1
    return BraceBalance(unclosed=depth, unmatched_closers=unmatched)


def close_delimiters(text: str, count: int) -> str:
    """Append ``count`` closing braces, one per line."""
    body = text if text.endswith("\n") else text + "\n"
    return body + "}\n" * count


def remove_unmatched_closers(text: str, offsets: list[int]) -> str:
    drop = set(offsets)
    return "".join(ch for i, ch in enumerate(text) if i not in drop)


# ---------------------------------------------------------------------------
# Tags and attributes
# ---------------------------------------------------------------------------

_TAG_START = re.compile(r"<[A-Za-z]")
_UNQUOTED_VALUE = re.compile(r"([A-Za-z_:][\w:.-]*)=(?![\"'{])([^\s\"'{}<>=`]+?)(?=\s|/?>|$)")


def _tag_end(masked: str, start: int) -> int:
    """Offset of the ``>`` closing the tag opened at ``start`` (brace depth 0)."""
    depth = 0
    for i in range(start + 1, len(masked)):
        ch = masked[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth = max(0, depth - 1)
        elif ch == ">" and depth == 0:
            return i
    return len(masked) - 1


def find_unquoted_attributes(text: str) -> list[AttributeSpan]:
    """Attribute values written without quotes or braces (``className=foo``)."""
    masked = mask_literals(text)
    spans: list[AttributeSpan] = []
    pos = 0
    while True:
        match = _TAG_START.search(masked, pos)
        if match is None:
            break
        start = match.start()
        end = _tag_end(masked, start)
        # Only attribute text at brace depth 0 is inspected.
        shell = []
        depth = 0
        for ch in masked[start : end + 1]:
            if ch == "{":
                depth += 1
            elif ch == "}":
                depth = max(0, depth - 1)
            shell.append(ch if depth == 0 and ch != "}" else " ")
        for attr in _UNQUOTED_VALUE.finditer("".join(shell)):
            spans.append(
                AttributeSpan(
                    name=attr.group(1),
                    start=start + attr.start(2),
                    end=start + attr.end(2),
                )
            )
        pos = end + 1
    return spans


def quote_attributes(text: str, spans: list[AttributeSpan]) -> str:
    result = text
    for span in sorted(spans, key=lambda s: s.start, reverse=True):
        value = result[span.start : span.end]
        result = f'{result[: span.start]}"{value}"{result[span.end :]}'
    return result


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")


def json_error(text: str) -> Optional[str]:
    try:
        json.loads(text)
    except json.JSONDecodeError as exc:
        return f"{exc.msg} (line {exc.lineno}, column {exc.colno})"
    return None


def repair_json(text: str) -> Optional[str]:
    """Strip trailing commas and close open brackets/strings.

    Returns the repaired text, or ``None`` if the result is still invalid.
    """
    candidate = _TRAILING_COMMA.sub(r"\1", text).rstrip()
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in candidate:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append("}" if ch == "{" else "]")
        elif ch in "}]" and stack and stack[-1] == ch:
            stack.pop()
    if in_string:
        candidate += '"'
    candidate = _TRAILING_COMMA.sub(r"\1", candidate + "".join(reversed(stack)))
    if json_error(candidate) is not None:
        return None
    return json.dumps(json.loads(candidate), indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def check_syntax(path: str, content: str) -> list[SyntaxIssue]:
    """Run every check that applies to the file type of ``path``."""
    suffix = PurePosixPath(path).suffix.lower()
    issues: list[SyntaxIssue] = []

    if suffix == ".json":
        error = json_error(content)
        if error is not None:
            issues.append(SyntaxIssue(code=INVALID_JSON, message=f"Invalid JSON: {error}"))
        return issues

    if suffix in SCRIPT_SUFFIXES or suffix == ".css":
        balance = brace_balance(content, line_comments=suffix != ".css")
        if balance.unmatched_closers:
            first = balance.unmatched_closers[0]
            issues.append(
                SyntaxIssue(
                    code=UNBALANCED_DELIMITER,
                    message=f"{len(balance.unmatched_closers)} unmatched '}}'",
                    line=_line_of(content, first),
                )
            )
        elif balance.unclosed:
            issues.append(
                SyntaxIssue(
                    code=UNBALANCED_DELIMITER,
                    message=f"{balance.unclosed} unclosed '{{'",
                    line=max(1, content.count("\n")),
                )
            )

    if suffix in MARKUP_SUFFIXES:
        spans = find_unquoted_attributes(content)
        if spans:
            names = ", ".join(dict.fromkeys(s.name for s in spans))
            issues.append(
                SyntaxIssue(
                    code=UNQUOTED_ATTRIBUTE,
                    message=f"Unquoted attribute value(s): {names}",
                    line=_line_of(content, spans[0].start),
                )
            )
    return issues
