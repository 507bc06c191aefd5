"""Synthetic datasets sampled from a target function of the input plane."""

from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, List, MutableMapping

import numpy as np

from ..core.types import Example

TargetFn = Callable[[float, float], float]

_REGISTRY: MutableMapping[str, TargetFn] = {}


def register_target(name: str) -> Callable[[TargetFn], TargetFn]:
    """Register a named target function::

        @register_target("ring")
        def ring(x, y):
            ...
    """

    def _decorator(func: TargetFn) -> TargetFn:
        _REGISTRY[name] = func
        return func

    return _decorator


def get_target(name: str) -> TargetFn:
    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown target function {name!r}. Available targets: {available}")
    return _REGISTRY[name]


def available_targets() -> Iterable[str]:
    return sorted(_REGISTRY)


@register_target("xor")
def _xor(x: float, y: float) -> float:
    return x * y


@register_target("circle")
def _circle(x: float, y: float) -> float:
    return x * x + y * y


@register_target("saddle")
def _saddle(x: float, y: float) -> float:
    return x * x - y * y


@register_target("sine")
def _sine(x: float, y: float) -> float:
    return math.sin(x) * math.cos(y)


def generate_from_function(
    func: TargetFn | str,
    n_points: int = 100,
    *,
    seed: int | np.random.Generator | None = None,
    low: float = -3.0,
    high: float = 3.0,
) -> List[Example]:
    """Sample ``n_points`` uniform inputs and normalise targets to ``[-1, 1]``.

    A constant function keeps its value, clamped to ``[-10, 10]``.
    """

    if isinstance(func, str):
        func = get_target(func)
    if n_points <= 0:
        raise ValueError(f"n_points must be positive, got {n_points}")
    rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)

    raw: list[tuple[float, float, float]] = []
    for _ in range(n_points):
        x = float(rng.uniform(low, high))
        y = float(rng.uniform(low, high))
        target = float(func(x, y))
        if not math.isfinite(target):
            raise ValueError(f"Function produced invalid value at ({x}, {y})")
        raw.append((x, y, target))

    lo = min(t for _, _, t in raw)
    hi = max(t for _, _, t in raw)
    span = hi - lo
    examples = []
    for x, y, target in raw:
        if span == 0:
            value = max(-10.0, min(10.0, target))
        else:
            value = 2.0 * (target - lo) / span - 1.0
        examples.append(Example(inputs=(x, y), targets=(value,)))
    return examples


def target_range(examples: Iterable[Example]) -> Dict[str, float]:
    values = [t for example in examples for t in example.targets]
    return {"min": min(values), "max": max(values)} if values else {}


__all__ = [
    "available_targets",
    "generate_from_function",
    "get_target",
    "register_target",
    "target_range",
]
