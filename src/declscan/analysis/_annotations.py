"""Annotation parser for ``// sourcery:`` comments above a declaration.

Scanning starts at the line nearest the declaration and walks upwards:

- ``// sourcery: a, b = 2`` (or ``/* sourcery: ... */``) contributes.
- Any other comment (``///`` docs, plain ``//``, block comment lines) is
  skipped, so annotations separated by documentation still apply.
- A blank line or a line of code ends the scan.

Contributing lines are then applied top to bottom, so for a repeated key
the line closest to the declaration wins.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from declscan.model.annotations import (
    AnnotationValue,
    Annotations,
    BoolValue,
    NumberValue,
    StringValue,
)

from ._config import AnalysisConfig, get_config

logger = logging.getLogger(__name__)

_NUMBER = re.compile(r"-?\d+")


def parse_annotations(
    lines: Sequence[str],
    config: AnalysisConfig | None = None,
) -> Annotations:
    """Annotations declared by the comment *lines* above a declaration.

    *lines* are raw source lines in source order, nearest line last.
    """
    config = config or get_config()

    contributing: list[str] = []
    in_block = False
    for line in reversed(lines):
        stripped = line.strip()
        if in_block:
            in_block = not stripped.startswith("/*")
            continue
        if not stripped:
            break
        body = _annotation_body(stripped, config.annotation_prefix)
        if body is not None:
            contributing.append(body)
        elif _closes_block(stripped):
            in_block = True
        elif not stripped.startswith(("//", "/*")):
            break

    annotations: Annotations = {}
    for body in reversed(contributing):
        annotations.update(parse_annotation_line(body))
    return annotations


def parse_annotation_line(body: str) -> Annotations:
    """Parse ``key, key = value, ...`` (the text after the prefix).

    Pairs apply left to right; a repeated key keeps its last value.
    """
    annotations: Annotations = {}
    for pair in _split_pairs(body):
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not key:
            if pair.strip():
                logger.warning("Ignoring annotation without a key: %r", pair.strip())
            continue
        annotations[key] = _parse_value(raw.strip()) if sep else BoolValue()
    return annotations


def _parse_value(raw: str) -> AnnotationValue:
    if _NUMBER.fullmatch(raw):
        return NumberValue(value=int(raw))
    if len(raw) >= 2 and raw.startswith('"') and raw.endswith('"'):
        return StringValue(value=raw[1:-1])
    return StringValue(value=raw)


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------

def _annotation_body(line: str, prefix: str) -> str | None:
    """Text after the prefix for an annotation line, else None."""
    if line.startswith("//") and not line.startswith("///"):
        text = line[2:].lstrip()
    elif line.startswith("/*") and not line.startswith("/**") and line.endswith("*/"):
        text = line[2:-2].strip()
    else:
        return None
    if not text.startswith(prefix):
        return None
    return text[len(prefix):]


def _closes_block(line: str) -> bool:
    """Last line of a multi-line block comment."""
    return line.endswith("*/") and "/*" not in line


def _split_pairs(body: str) -> list[str]:
    """Split on commas that are not inside a double-quoted string."""
    pairs: list[str] = []
    current: list[str] = []
    in_string = False
    for ch in body:
        if ch == '"':
            in_string = not in_string
        if ch == "," and not in_string:
            pairs.append("".join(current))
            current = []
        else:
            current.append(ch)
    pairs.append("".join(current))
    return pairs
