"""Parse pasted training data into examples.

Three line formats are understood, each line on its own:

* arrow form ``1.0,2.0 -> 3.0`` (comma lists on both sides),
* comma form ``1.0,2.0,3.0`` with the last value as the single target,
* whitespace form ``1.0 2.0 3.0``, same convention as the comma form.

Text starting with ``[`` or ``{`` is first tried as JSON holding one or
more ``{"inputs": [...], "targets": [...]}`` objects.  Lines matching no
format are skipped.
"""

from __future__ import annotations

import json
import math
from typing import Iterable, List, Mapping, Sequence, Tuple

from ..core.types import Example


def _floats(tokens: Iterable[str]) -> Tuple[float, ...] | None:
    values = []
    for token in tokens:
        try:
            value = float(token.strip())
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        values.append(value)
    return tuple(values) or None


def _as_values(raw: object) -> Tuple[float, ...] | None:
    items = raw if isinstance(raw, Sequence) and not isinstance(raw, str) else [raw]
    values = []
    for item in items:
        if isinstance(item, bool) or not isinstance(item, (int, float)):
            return None
        if not math.isfinite(item):
            return None
        values.append(float(item))
    return tuple(values) or None


def example_from_mapping(item: object) -> Example | None:
    if not isinstance(item, Mapping) or "inputs" not in item or "targets" not in item:
        return None
    inputs = _as_values(item["inputs"])
    targets = _as_values(item["targets"])
    if inputs is None or targets is None:
        return None
    return Example(inputs=inputs, targets=targets)


def parse_line(line: str) -> Example | None:
    """Parse one line, returning ``None`` when it matches no format."""

    line = line.strip()
    if not line:
        return None
    if "->" in line:
        left, _, right = line.partition("->")
        inputs = _floats(left.split(","))
        targets = _floats(right.split(","))
        if inputs is not None and targets is not None:
            return Example(inputs=inputs, targets=targets)
    for parts in (line.split(","), line.split()):
        values = _floats(parts)
        if values is not None and len(values) >= 2:
            return Example(inputs=values[:-1], targets=values[-1:])
    return None


def _parse_json(text: str) -> List[Example] | None:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return None
    items = payload if isinstance(payload, list) else [payload]
    examples = []
    for item in items:
        example = example_from_mapping(item)
        if example is not None:
            examples.append(example)
    return examples


def parse_training_data(text: str) -> List[Example]:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return []
    if lines[0].startswith(("[", "{")):
        parsed = _parse_json(text)
        if parsed is not None:
            return parsed
    examples = []
    for line in lines:
        example = parse_line(line)
        if example is not None:
            examples.append(example)
    return examples


__all__ = ["example_from_mapping", "parse_line", "parse_training_data"]
