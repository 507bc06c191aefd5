import math

import numpy as np
import pytest

from dualnets.core.errors import UnsupportedInputDimension
from dualnets.core.network import FeedForwardNetwork
from dualnets.core.types import Bounds, GridPoint, Region
from dualnets.regions import (
    PALETTE,
    build_dual_graph,
    differing_bit,
    hamming_distance,
    is_neuron_active,
    probe_neighbors,
    regions_with_active,
    sample_regions,
)


def _axis_network(rows):
    """Single hidden layer whose neurons read the given weight rows."""

    network = FeedForwardNetwork([2, len(rows), 1], seed=0)
    network.zero()
    for i, (wx, wy) in enumerate(rows):
        network.set_weight(0, i, 0, wx)
        network.set_weight(0, i, 1, wy)
    return network


def _region(region_id, signature):
    return Region(
        id=region_id,
        signature=signature,
        color=PALETTE[0],
        points=[GridPoint(px=region_id, py=region_id, x=0.0, y=0.0)],
    )


@pytest.mark.parametrize(
    "a, b, c",
    [
        ((0, 0, 0), (1, 0, 0), (1, 1, 0)),
        ((1, 0, 1, 1), (0, 0, 1, 0), (1, 1, 1, 1)),
        ((), (), ()),
    ],
)
def test_hamming_distance_is_a_metric(a, b, c):
    assert hamming_distance(a, a) == 0
    assert hamming_distance(a, b) == hamming_distance(b, a)
    assert hamming_distance(a, c) <= hamming_distance(a, b) + hamming_distance(b, c)


def test_hamming_distance_of_different_lengths_is_infinite():
    assert hamming_distance((0, 1), (0, 1, 1)) == math.inf


def test_differing_bit_and_active_lookup():
    assert differing_bit((0, 1, 0), (0, 1, 1)) == 2
    assert differing_bit((1, 1), (1, 1)) == -1
    assert is_neuron_active((0, 1), 1)
    assert not is_neuron_active((0, 1), 0)
    assert not is_neuron_active((0, 1), 5)


def test_zero_network_has_single_region_and_no_edges():
    network = FeedForwardNetwork([2, 3, 1], seed=0)
    network.zero()
    result = sample_regions(network, resolution=10)
    assert result.count == 1
    graph = build_dual_graph(result)
    assert len(graph.vertices) == 1
    assert graph.edges == ()


def test_every_grid_cell_lands_in_exactly_one_region():
    network = FeedForwardNetwork([2, 5, 4, 1], seed=11)
    result = sample_regions(network, resolution=12)
    assert sum(len(region.points) for region in result.regions.values()) == 144
    assert sorted(region.id for region in result.ordered()) == list(range(result.count))
    for signature, region in result.regions.items():
        assert region.signature == signature
        assert len(signature) == 9


def test_sampling_positions_ids_and_centroids():
    network = _axis_network([(1.0, 0.0)])
    result = sample_regions(network, Bounds(-2.0, 2.0, -2.0, 2.0), resolution=4)
    inactive, active = result.ordered()
    assert inactive.signature == (0,) and inactive.id == 0
    assert active.signature == (1,) and active.id == 1
    assert len(inactive.points) == 12
    assert len(active.points) == 4
    assert {p.x for p in active.points} == {1.0}
    assert sorted(p.y for p in active.points) == [-2.0, -1.0, 0.0, 1.0]
    assert active.centroid == (225.0, 112.5)
    assert active.real_centroid == (1.0, -0.5)
    assert inactive.color == PALETTE[1]
    assert active.color == PALETTE[2]


def test_sampling_bottom_row_maps_to_bottom_of_canvas():
    network = _axis_network([(0.0, 1.0)])
    result = sample_regions(network, Bounds(-2.0, 2.0, -2.0, 2.0), resolution=4)
    lowest = [p for p in result.ordered()[0].points if p.y == -2.0]
    assert {p.py for p in lowest} == {225}


def test_sampling_requires_two_inputs_and_a_positive_resolution():
    with pytest.raises(UnsupportedInputDimension):
        sample_regions(FeedForwardNetwork([3, 2, 1], seed=0))
    network = FeedForwardNetwork([2, 2, 1], seed=0)
    for bad in (0, -4, 2.5):
        with pytest.raises(ValueError):
            sample_regions(network, resolution=bad)


def test_quadrant_network_dual_graph_is_a_four_cycle():
    network = _axis_network([(1.0, 0.0), (0.0, 1.0)])
    result = sample_regions(network, Bounds(-2.0, 2.0, -2.0, 2.0), resolution=4)
    signatures = {region.id: region.signature for region in result.ordered()}
    assert signatures == {0: (0, 0), 1: (0, 1), 2: (1, 0), 3: (1, 1)}

    graph = build_dual_graph(result)
    assert graph.edges == ((0, 1), (0, 2), (1, 3), (2, 3))
    assert graph.adjacency_list() == {0: [1, 2], 1: [0, 3], 2: [0, 3], 3: [1, 2]}
    assert graph.neighbors(3) == [1, 2]
    assert graph.edge_keys() == ["0,1", "0,2", "1,3", "2,3"]
    with pytest.raises(KeyError):
        graph.neighbors(9)

    assert regions_with_active(result, [0]) == [2, 3]
    assert regions_with_active(result, [0, 1]) == [3]
    assert regions_with_active(result, []) == [0, 1, 2, 3]


def test_dual_graph_edges_are_unique_ordered_pairs():
    regions = [_region(2, (1, 1)), _region(0, (0, 0)), _region(1, (0, 1))]
    graph = build_dual_graph(regions)
    assert [v.id for v in graph.vertices] == [0, 1, 2]
    assert graph.edges == ((0, 1), (1, 2))
    for a, b in graph.edges:
        assert a < b


def test_dual_graph_ignores_signatures_of_different_length():
    graph = build_dual_graph([_region(0, (0,)), _region(1, (0, 1))])
    assert graph.edges == ()


def test_probe_neighbors_finds_one_bit_flips_and_restores_trace():
    network = _axis_network([(1.0, 0.0)])
    neighbors = probe_neighbors(network, [0.05, 0.0])
    assert len(neighbors) == 1
    found = neighbors[0]
    assert found.signature == (0,)
    assert found.input_index == 0
    assert found.variation == -0.1
    assert np.allclose(network.activations[0], [0.05, 0.0])
    assert network.get_binary_state() == (1,)
