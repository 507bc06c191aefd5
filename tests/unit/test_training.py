import numpy as np
import pytest

from dualnets.core.errors import DimensionMismatch
from dualnets.core.network import FeedForwardNetwork
from dualnets.core.types import Example
from dualnets.training import LossHistory, Trainer, validate_examples


def _data():
    return [
        Example(inputs=(0.5, -0.3), targets=(0.7,)),
        Example(inputs=(-0.2, 0.8), targets=(-0.4,)),
    ]


def test_train_step_returns_mean_loss_and_records_history():
    network = FeedForwardNetwork([2, 3, 1], seed=0)
    reference = FeedForwardNetwork([2, 3, 1], seed=0)
    expected = np.mean([reference.backward(e.inputs, e.targets, 0.01) for e in _data()])

    trainer = Trainer(network, lr=0.01)
    loss = trainer.train_step(_data())
    assert loss == pytest.approx(expected)
    assert trainer.step_counter == 1
    assert len(trainer.history) == 1
    assert trainer.history.losses[0] == (1, loss)


def test_train_step_with_empty_data_changes_nothing():
    network = FeedForwardNetwork([2, 3, 1], seed=0)
    weights = [W.copy() for W in network.weights]
    trainer = Trainer(network)
    assert trainer.train_step([]) is None
    assert trainer.train_batch([], steps=5) == []
    assert trainer.step_counter == 0
    assert all(np.array_equal(a, b) for a, b in zip(weights, network.weights))


def test_mismatched_examples_are_rejected_before_training():
    network = FeedForwardNetwork([2, 3, 1], seed=0)
    weights = [W.copy() for W in network.weights]
    data = _data() + [Example(inputs=(1.0,), targets=(0.0,))]
    with pytest.raises(DimensionMismatch):
        Trainer(network).train_step(data)
    assert all(np.array_equal(a, b) for a, b in zip(weights, network.weights))
    with pytest.raises(DimensionMismatch):
        validate_examples([Example(inputs=(1.0, 2.0), targets=(1.0, 2.0))], [2, 3, 1])


def test_train_batch_reduces_loss():
    trainer = Trainer(FeedForwardNetwork([2, 3, 1], seed=7), lr=0.01)
    losses = trainer.train_batch(_data()[:1], steps=200)
    assert len(losses) == 200
    assert losses[-1] < losses[0]
    assert trainer.evaluate(_data()[:1]) < losses[0]


def test_learning_rate_override_and_validation():
    network = FeedForwardNetwork([2, 3, 1], seed=0)
    reference = FeedForwardNetwork([2, 3, 1], seed=0)
    Trainer(network, lr=0.01).train_step(_data()[:1], lr=0.5)
    Trainer(reference, lr=0.5).train_step(_data()[:1])
    assert all(np.array_equal(a, b) for a, b in zip(reference.weights, network.weights))
    with pytest.raises(ValueError):
        Trainer(network, lr=0.0)


def test_jump_to_restores_recorded_state():
    network = FeedForwardNetwork([2, 4, 1], seed=2)
    trainer = Trainer(network, lr=0.05)
    trainer.train_batch(_data(), steps=5)

    replica = FeedForwardNetwork([2, 4, 1], seed=0)
    replica.load_state(trainer.history.states[1])
    expected = replica.forward([0.1, 0.1])

    assert trainer.jump_to(1) == 2
    assert not trainer.history.viewing_latest
    assert np.array_equal(network.forward([0.1, 0.1]), expected)
    with pytest.raises(IndexError):
        trainer.jump_to(5)


def test_history_keeps_only_latest_points():
    network = FeedForwardNetwork([2, 1], seed=0)
    history = LossHistory(max_points=3)
    for step in range(1, 6):
        history.record(step, float(step), network.save_state())
    assert [step for step, _ in history.losses] == [3, 4, 5]
    assert len(history.states) == 3
    assert history.viewing_latest
    assert history.stats() == {"min": 3.0, "max": 5.0, "mean": 4.0, "last": 5.0}
    history.clear()
    assert history.stats() == {}


def test_callbacks_receive_step_metrics():
    seen = []

    class Sink:
        def __init__(self):
            self.steps = []

        def on_step(self, step, metrics):
            self.steps.append(step)

    sink = Sink()
    trainer = Trainer(
        FeedForwardNetwork([2, 3, 1], seed=0),
        callbacks=[sink, lambda step, metrics: seen.append(metrics["loss"])],
    )
    trainer.train_batch(_data(), steps=3)
    assert sink.steps == [1, 2, 3]
    assert len(seen) == 3
    trainer.reset()
    assert trainer.step_counter == 0
    assert len(trainer.history) == 0
