"""Fully-connected feed-forward network with manual backpropagation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Sequence

import numpy as np

from .activations import active_bits, relu, relu_deriv
from .errors import DimensionMismatch, InvalidArchitecture, StaleState
from .types import Array, Gradients, ModelDescription, NetworkState, Signature

SeedLike = int | np.random.Generator | None


def _make_rng(seed: SeedLike) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def validate_architecture(architecture: Sequence[int]) -> List[int]:
    """Return ``architecture`` as a list of ints or raise ``InvalidArchitecture``."""

    try:
        dims = list(architecture)
    except TypeError as exc:
        raise InvalidArchitecture(f"Architecture must be a sequence, got {architecture!r}") from exc
    if len(dims) < 2:
        raise InvalidArchitecture(
            f"Architecture needs at least an input and an output layer, got {dims}"
        )
    for width in dims:
        if isinstance(width, bool) or not isinstance(width, (int, np.integer)):
            raise InvalidArchitecture(f"Layer widths must be integers, got {width!r}")
        if width <= 0:
            raise InvalidArchitecture(f"Layer widths must be positive, got {dims}")
    return [int(width) for width in dims]


def _restore_trace(state: NetworkState, dims: Sequence[int]) -> tuple[list[Array], list[Array]]:
    """Copy the activation trace of ``state``, checking it fits ``dims``.

    An empty trace is allowed and means no forward pass has run.
    """

    activations = [np.array(a, dtype=np.float64).reshape(-1) for a in state.activations]
    z_values = [np.array(z, dtype=np.float64).reshape(-1) for z in state.z_values]
    if not activations and not z_values:
        return [], []
    widths = [a.shape[0] for a in activations]
    z_widths = [z.shape[0] for z in z_values]
    if widths != list(dims) or z_widths != list(dims[1:]):
        raise InvalidArchitecture(
            f"Snapshot trace does not fit {list(dims)}: activations {widths}, "
            f"pre-activations {z_widths}"
        )
    return activations, z_values


@dataclass
class FeedForwardNetwork:
    """Dense ReLU network with a linear output layer.

    ``weights[l]`` has shape ``(architecture[l + 1], architecture[l])`` and
    ``biases[l]`` length ``architecture[l + 1]``.  Every parameter starts
    uniform in ``[-1, 1)``.  The most recent forward pass is kept in
    ``activations`` (one vector per layer) and ``z_values`` (one
    pre-activation vector per transition); any call to :meth:`forward`
    overwrites both.
    """

    architecture: Sequence[int]
    seed: SeedLike = None
    weights: List[Array] = field(init=False, repr=False)
    biases: List[Array] = field(init=False, repr=False)
    activations: List[Array] = field(init=False, repr=False, default_factory=list)
    z_values: List[Array] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self) -> None:
        self.architecture = validate_architecture(self.architecture)
        self.randomize(self.seed)

    # ------------------------------------------------------------------
    # Shape helpers

    @property
    def layers(self) -> int:
        return len(self.architecture)

    @property
    def input_size(self) -> int:
        return self.architecture[0]

    @property
    def output_size(self) -> int:
        return self.architecture[-1]

    @property
    def hidden_sizes(self) -> List[int]:
        return list(self.architecture[1:-1])

    def describe(self) -> ModelDescription:
        return ModelDescription(layer_dims=list(self.architecture))

    def parameter_count(self) -> int:
        return int(sum(w.size + b.size for w, b in zip(self.weights, self.biases)))

    # ------------------------------------------------------------------
    # Parameter editing

    def randomize(self, seed: SeedLike = None) -> None:
        """Redraw every weight and bias uniformly from ``[-1, 1)``."""

        rng = _make_rng(seed)
        dims = self.architecture
        self.weights = [
            rng.uniform(-1.0, 1.0, size=(out_dim, in_dim))
            for in_dim, out_dim in zip(dims[:-1], dims[1:])
        ]
        self.biases = [rng.uniform(-1.0, 1.0, size=out_dim) for out_dim in dims[1:]]

    def zero(self) -> None:
        for W in self.weights:
            W.fill(0.0)
        for b in self.biases:
            b.fill(0.0)

    def set_weight(self, layer: int, i: int, j: int, value: float) -> None:
        W = self.weights[layer]
        if not (0 <= i < W.shape[0] and 0 <= j < W.shape[1]):
            raise IndexError(f"Weight ({i}, {j}) out of range for layer {layer} of shape {W.shape}")
        W[i, j] = float(value)

    def set_bias(self, layer: int, i: int, value: float) -> None:
        b = self.biases[layer]
        if not 0 <= i < b.shape[0]:
            raise IndexError(f"Bias {i} out of range for layer {layer} of size {b.shape[0]}")
        b[i] = float(value)

    # ------------------------------------------------------------------
    # Propagation

    def _as_vector(self, values: Sequence[float] | Array, size: int, name: str) -> Array:
        vec = np.asarray(values, dtype=np.float64)
        if vec.ndim != 1 or vec.shape[0] != size:
            raise DimensionMismatch(
                f"Expected {name} of length {size}, got shape {vec.shape}"
            )
        return vec

    def forward(self, inputs: Sequence[float] | Array) -> Array:
        """Run the network on one input vector and return the output vector."""

        x = self._as_vector(inputs, self.input_size, "input")
        activations: list[Array] = [x.copy()]
        z_values: list[Array] = []
        last = len(self.weights) - 1
        for idx, (W, b) in enumerate(zip(self.weights, self.biases)):
            z = W @ activations[-1] + b
            z_values.append(z)
            activations.append(z.copy() if idx == last else relu(z))
        self.activations = activations
        self.z_values = z_values
        return activations[-1].copy()

    def gradients(
        self, inputs: Sequence[float] | Array, targets: Sequence[float] | Array
    ) -> tuple[float, Gradients]:
        """Return the squared-error loss and parameter gradients for one example.

        Gradients are keyed ``W{l}``/``b{l}``.  Deltas flow backwards
        through the weights as they were during the forward pass.
        """

        t = self._as_vector(targets, self.output_size, "target")
        output = self.forward(inputs)
        error = output - t
        loss = 0.5 * float(np.dot(error, error))

        grads: Gradients = {}
        delta = error
        for idx in reversed(range(len(self.weights))):
            grads[f"W{idx}"] = np.outer(delta, self.activations[idx])
            grads[f"b{idx}"] = delta.copy()
            if idx > 0:
                delta = (self.weights[idx].T @ delta) * relu_deriv(self.z_values[idx - 1])
        return loss, grads

    def apply_gradients(self, grads: Gradients, lr: float) -> None:
        for idx in range(len(self.weights)):
            grad_W = grads.get(f"W{idx}")
            if grad_W is not None:
                self.weights[idx] -= lr * grad_W
            grad_b = grads.get(f"b{idx}")
            if grad_b is not None:
                self.biases[idx] -= lr * grad_b

    def backward(
        self,
        inputs: Sequence[float] | Array,
        targets: Sequence[float] | Array,
        lr: float,
    ) -> float:
        """One gradient-descent step on a single example; returns its loss.

        Layers are processed from the output back.  Each layer's weights
        and biases are updated before its delta is passed on, so the
        previous layer's delta is computed through the updated weights.
        Use :meth:`gradients` for the exact gradient of the loss.
        """

        t = self._as_vector(targets, self.output_size, "target")
        output = self.forward(inputs)
        error = output - t
        loss = 0.5 * float(np.dot(error, error))

        delta = error
        for idx in reversed(range(len(self.weights))):
            self.weights[idx] -= lr * np.outer(delta, self.activations[idx])
            self.biases[idx] -= lr * delta
            if idx > 0:
                delta = (self.weights[idx].T @ delta) * relu_deriv(self.z_values[idx - 1])
        return loss

    def get_binary_state(self) -> Signature:
        """Hidden-layer activation signature of the last forward pass."""

        if not self.activations:
            raise StaleState("No forward pass has run yet")
        bits: list[int] = []
        for layer in self.activations[1:-1]:
            bits.extend(int(bit) for bit in active_bits(layer))
        return tuple(bits)

    # ------------------------------------------------------------------
    # Snapshots

    def save_state(self) -> NetworkState:
        return NetworkState(
            architecture=list(self.architecture),
            weights=[W.copy() for W in self.weights],
            biases=[b.copy() for b in self.biases],
            activations=[a.copy() for a in self.activations],
            z_values=[z.copy() for z in self.z_values],
        )

    def load_state(self, state: NetworkState) -> None:
        """Replace parameters and trace with deep copies from ``state``."""

        dims = validate_architecture(state.architecture)
        expected = len(dims) - 1
        if len(state.weights) != expected or len(state.biases) != expected:
            raise InvalidArchitecture(
                f"Snapshot for {dims} needs {expected} weight and bias arrays, got "
                f"{len(state.weights)} and {len(state.biases)}"
            )
        weights: list[Array] = []
        biases: list[Array] = []
        for idx, (in_dim, out_dim) in enumerate(zip(dims[:-1], dims[1:])):
            W = np.array(state.weights[idx], dtype=np.float64)
            b = np.array(state.biases[idx], dtype=np.float64).reshape(-1)
            if W.shape != (out_dim, in_dim) or b.shape != (out_dim,):
                raise InvalidArchitecture(
                    f"Layer {idx} expects weights {(out_dim, in_dim)} and biases "
                    f"({out_dim},), got {W.shape} and {b.shape}"
                )
            weights.append(W)
            biases.append(b)
        activations, z_values = _restore_trace(state, dims)
        self.architecture = dims
        self.weights = weights
        self.biases = biases
        self.activations = activations
        self.z_values = z_values

    def state_dict(self) -> Mapping[str, Array]:
        state = {f"W{idx}": W.copy() for idx, W in enumerate(self.weights)}
        state.update({f"b{idx}": b.copy() for idx, b in enumerate(self.biases)})
        return state

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        updates: list[tuple[list[Array], int, Array]] = []
        for idx in range(len(self.weights)):
            for key, target in ((f"W{idx}", self.weights), (f"b{idx}", self.biases)):
                if key not in state:
                    raise KeyError(f"Missing parameter {key} in state dict")
                value = np.array(state[key], dtype=np.float64)
                if value.shape != target[idx].shape:
                    raise InvalidArchitecture(
                        f"Parameter {key} expects shape {target[idx].shape}, got {value.shape}"
                    )
                updates.append((target, idx, value))
        for target, idx, value in updates:
            target[idx] = value


__all__ = ["FeedForwardNetwork", "validate_architecture"]
