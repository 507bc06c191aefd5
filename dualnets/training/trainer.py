"""Per-example gradient-descent training with a rewindable loss history."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Sequence, Tuple

import numpy as np

from ..core.errors import DimensionMismatch
from ..core.network import FeedForwardNetwork
from ..core.types import Example, NetworkState


def validate_examples(data: Iterable[Example], architecture: Sequence[int]) -> None:
    """Raise ``DimensionMismatch`` if any example does not fit the network."""

    d_in, d_out = architecture[0], architecture[-1]
    for idx, example in enumerate(data):
        if len(example.inputs) != d_in or len(example.targets) != d_out:
            raise DimensionMismatch(
                f"Example {idx} has {len(example.inputs)} inputs and "
                f"{len(example.targets)} targets; expected {d_in} inputs and {d_out} outputs"
            )


@dataclass
class LossHistory:
    """Loss per training step together with the network state after it.

    Only the most recent ``max_points`` steps are kept.
    """

    max_points: int = 1000
    losses: List[Tuple[int, float]] = field(default_factory=list)
    states: List[NetworkState] = field(default_factory=list)
    current: int = -1

    def __len__(self) -> int:
        return len(self.losses)

    def record(self, step: int, loss: float, state: NetworkState) -> None:
        self.losses.append((int(step), float(loss)))
        self.states.append(state)
        self.current = len(self.losses) - 1
        if len(self.losses) > self.max_points:
            self.losses.pop(0)
            self.states.pop(0)
            self.current = max(0, self.current - 1)

    def jump_to(self, index: int, network: FeedForwardNetwork) -> int:
        """Restore ``network`` to the state recorded at ``index``; return its step."""

        if not 0 <= index < len(self.states):
            raise IndexError(f"No recorded step at index {index} (have {len(self.states)})")
        network.load_state(self.states[index].copy())
        self.current = index
        return self.losses[index][0]

    @property
    def viewing_latest(self) -> bool:
        return self.current == len(self.losses) - 1

    def stats(self) -> Mapping[str, float]:
        if not self.losses:
            return {}
        values = np.asarray([loss for _, loss in self.losses], dtype=np.float64)
        return {
            "min": float(values.min()),
            "max": float(values.max()),
            "mean": float(values.mean()),
            "last": float(values[-1]),
        }

    def clear(self) -> None:
        self.losses.clear()
        self.states.clear()
        self.current = -1


class Trainer:
    """Run training steps over a dataset, one ``backward`` call per example."""

    def __init__(
        self,
        network: FeedForwardNetwork,
        lr: float = 0.01,
        callbacks: Sequence[object] | None = None,
        history: LossHistory | None = None,
    ) -> None:
        if lr <= 0:
            raise ValueError(f"Learning rate must be positive, got {lr}")
        self.network = network
        self.lr = float(lr)
        self.callbacks = list(callbacks or [])
        self.history = history if history is not None else LossHistory()
        self.step_counter = 0

    def train_step(self, data: Sequence[Example], lr: float | None = None) -> float | None:
        """One pass over ``data``; returns the mean loss, or ``None`` without data."""

        if not data:
            return None
        validate_examples(data, self.network.architecture)
        rate = self.lr if lr is None else float(lr)
        total = 0.0
        for example in data:
            total += self.network.backward(example.inputs, example.targets, rate)
        avg_loss = total / len(data)
        self.step_counter += 1
        self.history.record(self.step_counter, avg_loss, self.network.save_state())
        self._emit_step(self.step_counter, {"loss": avg_loss})
        return avg_loss

    def train_batch(
        self, data: Sequence[Example], lr: float | None = None, steps: int = 100
    ) -> List[float]:
        losses: List[float] = []
        for _ in range(steps):
            loss = self.train_step(data, lr)
            if loss is None:
                break
            losses.append(loss)
        return losses

    def evaluate(self, data: Sequence[Example]) -> float:
        """Mean loss over ``data`` without updating parameters."""

        if not data:
            return 0.0
        validate_examples(data, self.network.architecture)
        total = 0.0
        for example in data:
            error = self.network.forward(example.inputs) - np.asarray(example.targets)
            total += 0.5 * float(np.dot(error, error))
        return total / len(data)

    def jump_to(self, index: int) -> int:
        return self.history.jump_to(index, self.network)

    def reset(self) -> None:
        self.step_counter = 0
        self.history.clear()

    def _emit_step(self, step: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(step, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(step, metrics)


__all__ = ["LossHistory", "Trainer", "validate_examples"]
