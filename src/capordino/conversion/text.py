"""Text rewrites applied to CPRT prose before it is placed in the catalog.

CPRT text refers to organization-defined parameters (ODPs) in two ways:
- Assessment objectives tag them explicitly: "<03.01.01.ODP[01]: frequency>"
- Requirement statements use a generic marker: "[Assignment: ...]"

Both are rewritten into OSCAL parameter insertions. Assessment method
object lists ("[SELECT FROM: a; b; c]") are split into one paragraph per
object. Escaping always runs after rewriting, because OSCAL markup uses
square brackets for its own syntax.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

logger = logging.getLogger(__name__)

# Non-greedy, otherwise two tags on one line match as one
TAGGED_PLACEHOLDER_RE = re.compile(r"<([^<>]+?): [^<>]+?>")

# Opening of a marker; a marker opening with "[" runs to its balanced "]"
BRACKET_PLACEHOLDER_RE = re.compile(r"\[(?:Assignment|Selection)\b")

# Markdown paragraph break
PARAGRAPH_BREAK = "\n\n"


def insert_param_marker(identifier: str) -> str:
    """Return the OSCAL markdown insertion for a parameter."""
    return f"{{{{ insert: param, {identifier} }}}}"


def find_tagged_placeholders(text: str) -> list[str]:
    """Return the distinct placeholder identifiers tagged in text.

    Args:
        text: Objective text, e.g. "... <03.01.01.ODP[01]: frequency> ...".

    Returns:
        Identifiers in order of first appearance.
    """
    identifiers: list[str] = []
    for match in TAGGED_PLACEHOLDER_RE.finditer(text):
        identifier = match.group(1)
        if identifier not in identifiers:
            identifiers.append(identifier)
    return identifiers


def rewrite_tagged_placeholders(text: str) -> str:
    """Replace every tagged placeholder with a parameter insertion.

    Each identifier is substituted with its own pattern, since one text
    block can carry several different placeholders.
    """
    for identifier in find_tagged_placeholders(text):
        marker = insert_param_marker(identifier)
        pattern = re.compile("<" + re.escape(identifier) + r": [^<>]+?>")
        text = pattern.sub(lambda _m, marker=marker: marker, text)
    return text


def _closing_bracket(text: str, start: int) -> int | None:
    """Return the index just past the "]" balancing the "[" at start."""
    depth = 0
    for index in range(start, len(text)):
        if text[index] == "[":
            depth += 1
        elif text[index] == "]":
            depth -= 1
            if depth == 0:
                return index + 1
    return None


def find_bracket_markers(
    text: str, pattern: re.Pattern[str] = BRACKET_PLACEHOLDER_RE
) -> list[tuple[int, int]]:
    """Locate bracket markers, nested ones included.

    A marker starts wherever pattern matches. If it starts with "[" it
    extends to the balancing "]", so "[Selection: a [Assignment: b]; c]"
    yields the outer span and the inner one. Unterminated markers are
    skipped.

    Returns:
        (start, end) spans ordered by start.
    """
    spans: list[tuple[int, int]] = []
    for start in range(len(text)):
        match = pattern.match(text, start)
        if match is None or match.end() == start:
            continue
        if text[start] == "[":
            end = _closing_bracket(text, start)
            if end is None:
                continue
        else:
            end = match.end()
        spans.append((start, end))
    return spans


def rewrite_bracket_placeholders(
    text: str,
    identifiers: Iterable[str],
    pattern: re.Pattern[str] = BRACKET_PLACEHOLDER_RE,
) -> str:
    """Replace bracket markers with the given identifiers.

    Identifiers are handed out in order of each marker's opening bracket.
    A marker nested inside a replaced marker takes its identifier but
    disappears with the outer text, so later markers stay aligned with
    their identifiers. Markers left over once identifiers run out are kept.

    Args:
        text: Statement text.
        identifiers: Resolved placeholder identifiers, in discovery order.
        pattern: Regex matching the opening of one bracket marker.

    Returns:
        Rewritten text.
    """
    remaining = iter(identifiers)
    pieces: list[str] = []
    position = 0
    for start, end in find_bracket_markers(text, pattern):
        identifier = next(remaining, None)
        if identifier is None:
            break
        if start < position:
            continue
        pieces.append(text[position:start])
        pieces.append(insert_param_marker(identifier))
        position = end
    pieces.append(text[position:])
    return "".join(pieces)


def split_inline_list(text: str, prefix: str, suffix: str, separator: str) -> list[str] | None:
    """Split a framed inline list into its items.

    Args:
        text: Text such as "[SELECT FROM: a; b; c]".
        prefix: Literal opening the list ("[SELECT FROM: ").
        suffix: Literal closing the list ("]"); its first occurrence after
                the prefix ends the list.
        separator: Literal between items (";").

    Returns:
        Stripped, non-empty items, or None if text is not framed by
        prefix and suffix.
    """
    text = text.strip()
    if not text.startswith(prefix):
        return None
    end = text.find(suffix, len(prefix))
    if end == -1:
        return None
    body = text[len(prefix) : end]
    return [item.strip() for item in body.split(separator) if item.strip()]


def rewrite_inline_list(text: str, prefix: str, suffix: str, separator: str) -> str:
    """Rewrite a framed inline list so that each item is its own paragraph."""
    items = split_inline_list(text, prefix, suffix, separator)
    if items is None:
        logger.debug("No %r...%r list in %r, leaving text as is", prefix, suffix, text[:40])
        return text
    return PARAGRAPH_BREAK.join(items)


def escape_square_brackets(text: str) -> str:
    """Backslash-escape square brackets so they still render literally."""
    return text.replace("[", "\\[").replace("]", "\\]")


def escape_square_brackets_with_parentheses(text: str) -> str:
    """Replace square brackets with parentheses.

    Used for prose, where a bracket would be read as OSCAL parameter syntax.
    """
    return text.replace("[", "(").replace("]", ")")


def to_token(identifier: str) -> str:
    """Turn a CPRT identifier into an OSCAL id token."""
    return escape_square_brackets_with_parentheses(identifier.strip())
