import math

import numpy as np
import pytest

from voslayout import GradientDescentOptions, Layout, LayoutOptimizer, Network


def _network(n_nodes, edges, node_weights=None):
    adjacency = [[] for _ in range(n_nodes)]
    for i, j, weight in edges:
        adjacency[i].append((j, weight))
        adjacency[j].append((i, weight))
    first_neighbor_indices = [0]
    neighbors = []
    edge_weights = []
    for row in adjacency:
        for j, weight in sorted(row):
            neighbors.append(j)
            edge_weights.append(weight)
        first_neighbor_indices.append(len(neighbors))
    return Network(
        node_weights=node_weights or [1.0] * n_nodes,
        first_neighbor_indices=first_neighbor_indices,
        neighbors=neighbors,
        edge_weights=edge_weights,
    )


def _triangle():
    network = _network(3, [(0, 1, 1.0), (1, 2, 2.0)])
    layout = Layout.from_coordinates([[0.0, 3.0, 0.0], [0.0, 0.0, 4.0]])
    return network, layout


def _ring_with_chords(n_nodes=8):
    edges = [(i, (i + 1) % n_nodes, 1.0 + 0.25 * i) for i in range(n_nodes)]
    edges += [(0, 4, 2.0), (2, 6, 0.5)]
    weights = [1.0 + 0.1 * i for i in range(n_nodes)]
    return _network(n_nodes, edges, weights)


def test_quality_function_power_form():
    network, layout = _triangle()
    optimizer = LayoutOptimizer(network, layout, attraction=2, repulsion=1)

    # edges: 1 * 3**2 / 2 + 2 * 5**2 / 2; pairs: -(3 + 5 + 4)
    assert optimizer.calc_quality_function() == pytest.approx(17.5)


def test_quality_function_with_edge_weight_increment():
    network, layout = _triangle()
    optimizer = LayoutOptimizer(network, layout, attraction=2, repulsion=1, edge_weight_increment=0.5)

    assert optimizer.calc_quality_function() == pytest.approx(17.5 + 0.5 * (9 + 25 + 16) / 2)


def test_quality_function_logarithmic_form():
    network, layout = _triangle()
    optimizer = LayoutOptimizer(network, layout, attraction=0, repulsion=0)

    expected = math.log(3) + 2 * math.log(5) - (math.log(3) + math.log(5) + math.log(4))
    assert optimizer.calc_quality_function() == pytest.approx(expected)


def test_quality_function_uses_node_weights():
    network = _network(2, [(0, 1, 1.0)], node_weights=[2.0, 3.0])
    layout = Layout.from_coordinates([[0.0, 2.0], [0.0, 0.0]])
    optimizer = LayoutOptimizer(network, layout, attraction=1, repulsion=-1)

    # 1 * 2 / 1 - 6 * 2**-1 / -1
    assert optimizer.calc_quality_function() == pytest.approx(2.0 + 3.0)


def test_quality_function_coincident_nodes_follow_ieee():
    network = _network(2, [(0, 1, 1.0)])
    layout = Layout.from_coordinates([[0.5, 0.5], [0.5, 0.5]])

    diverging = LayoutOptimizer(network, layout.clone(), attraction=2, repulsion=-2)
    quality = diverging.calc_quality_function()
    assert math.isinf(quality) and quality > 0

    logarithmic = LayoutOptimizer(network, layout.clone(), attraction=0, repulsion=1)
    quality = logarithmic.calc_quality_function()
    assert math.isinf(quality) and quality < 0


def test_quality_function_invariant_under_rotation_and_reflection():
    network = _ring_with_chords()
    layout = Layout(network.n_nodes)
    layout.init_random_coordinates(np.random.default_rng(5))
    optimizer = LayoutOptimizer(network, layout, attraction=2, repulsion=1, edge_weight_increment=0.1)
    before = optimizer.calc_quality_function()

    layout.rotate(37.0)
    assert optimizer.calc_quality_function() == pytest.approx(before, rel=1e-9)
    layout.flip(0)
    assert optimizer.calc_quality_function() == pytest.approx(before, rel=1e-9)


def test_layout_node_count_must_match_network():
    network = _ring_with_chords()

    with pytest.raises(ValueError):
        LayoutOptimizer(network, Layout(network.n_nodes + 1))


def test_missing_layout_is_initialized_randomly():
    network = _ring_with_chords()
    first = LayoutOptimizer(network, rng=np.random.default_rng(9))
    second = LayoutOptimizer(network, rng=np.random.default_rng(9))

    coords = first.layout.get_coordinates()
    assert coords.shape == (2, network.n_nodes)
    assert np.array_equal(coords, second.layout.get_coordinates())
    assert np.all(np.abs(coords) <= 1.0)


def test_zero_iterations_leave_layout_untouched():
    network = _ring_with_chords()
    optimizer = LayoutOptimizer(network, rng=np.random.default_rng(1))
    before = optimizer.layout.get_coordinates()

    step_length = optimizer.run_gradient_descent(0, 0.8, 0.001, 0.75, 5, np.random.default_rng(2))

    assert step_length == 0.8
    assert np.array_equal(optimizer.layout.get_coordinates(), before)
    assert optimizer.last_iterations == 0
    assert optimizer.last_sweep_quality is None


def test_initial_step_below_minimum_stops_immediately():
    network = _ring_with_chords()
    optimizer = LayoutOptimizer(network, rng=np.random.default_rng(1))
    before = optimizer.layout.get_coordinates()

    assert optimizer.run_gradient_descent(100, 0.0001, 0.001, 0.75, 5) == 0.0001
    assert np.array_equal(optimizer.layout.get_coordinates(), before)


def test_single_sweep_moves_every_node_by_step_length():
    network = _ring_with_chords()
    optimizer = LayoutOptimizer(network, rng=np.random.default_rng(4))
    before = optimizer.layout.get_coordinates()

    step_length = optimizer.run_gradient_descent(1, 0.05, 0.001, 0.5, 5, np.random.default_rng(4))

    moved = np.hypot(*(optimizer.layout.get_coordinates() - before))
    assert np.allclose(moved, 0.05)
    # The first sweep always improves on an infinite previous estimate.
    assert step_length == 0.05
    assert optimizer.last_iterations == 1


def test_gradient_descent_is_reproducible():
    network = _ring_with_chords()
    results = []
    for _ in range(2):
        optimizer = LayoutOptimizer(network, rng=np.random.default_rng(21))
        step_length = optimizer.run_gradient_descent(50, 1.0, 0.001, 0.75, 5, np.random.default_rng(22))
        results.append((step_length, optimizer.layout.get_coordinates()))

    assert results[0][0] == results[1][0]
    assert np.array_equal(results[0][1], results[1][1])


def test_gradient_descent_lowers_quality():
    network = _ring_with_chords()
    optimizer = LayoutOptimizer(network, rng=np.random.default_rng(3))
    before = optimizer.calc_quality_function()

    optimizer.run_gradient_descent_with_options(
        GradientDescentOptions(max_iterations=300), np.random.default_rng(4)
    )

    after = optimizer.calc_quality_function()
    assert math.isfinite(after)
    assert after < before
    assert np.all(np.isfinite(optimizer.layout.get_coordinates()))


def test_two_node_spring_model_converges():
    network = _network(2, [(0, 1, 1.0)])
    runs = []
    for _ in range(2):
        optimizer = LayoutOptimizer(network, attraction=2, repulsion=-2, rng=np.random.default_rng(17))
        optimizer.run_gradient_descent(400, 1.0, 1e-6, 0.75, 5, np.random.default_rng(18))
        runs.append(optimizer.layout.get_coordinates())

    # d**2 / 2 + d**-2 / 2 is minimal at d == 1
    distance = float(np.hypot(*(runs[0][:, 0] - runs[0][:, 1])))
    assert np.all(np.isfinite(runs[0]))
    assert 0.5 < distance < 2.0
    assert np.array_equal(runs[0], runs[1])


def test_coincident_nodes_without_other_forces_become_nan():
    network = _network(2, [(0, 1, 1.0)])
    layout = Layout.from_coordinates([[0.3, 0.3], [-0.2, -0.2]])
    optimizer = LayoutOptimizer(network, layout, attraction=2, repulsion=1)

    step_length = optimizer.run_gradient_descent(3, 1.0, 0.001, 0.75, 5, np.random.default_rng(0))

    # a zero net gradient normalises as 0 / 0
    assert np.all(np.isnan(layout.get_coordinates()))
    # the first sweep estimates 0.0 and improves on inf; NaN never improves
    assert step_length == pytest.approx(0.75 ** 2)


def test_single_node_becomes_nan():
    network = Network(
        node_weights=[1.0], first_neighbor_indices=[0, 0], neighbors=[], edge_weights=[]
    )
    layout = Layout.from_coordinates([[0.2], [0.4]])
    optimizer = LayoutOptimizer(network, layout)

    step_length = optimizer.run_gradient_descent(2, 1.0, 0.001, 0.75, 5, np.random.default_rng(0))

    assert np.all(np.isnan(layout.get_coordinates()))
    assert optimizer.last_sweep_quality == 0.0
    assert step_length == pytest.approx(0.75)


@pytest.mark.parametrize(
    "edge_weight_increment, expected",
    [
        # 1 * 3**2 / 2 + 2 * 5**2 / 2 - (3 + 4 + 5)
        (0.0, 17.5),
        # plus 0.5 * (3**2 + 4**2 + 5**2) / 2
        (0.5, 30.0),
    ],
)
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_first_sweep_estimate_is_quality_of_starting_layout(edge_weight_increment, expected, seed):
    network, layout = _triangle()
    optimizer = LayoutOptimizer(
        network, layout, attraction=2, repulsion=1, edge_weight_increment=edge_weight_increment
    )
    assert optimizer.calc_quality_function() == pytest.approx(expected)

    optimizer.run_gradient_descent(1, 0.5, 0.001, 0.75, 5, np.random.default_rng(seed))

    assert optimizer.last_sweep_quality == pytest.approx(expected)
    assert optimizer.calc_quality_function() != pytest.approx(expected)


def test_first_sweep_estimate_in_logarithmic_form():
    network, layout = _triangle()
    optimizer = LayoutOptimizer(network, layout, attraction=0, repulsion=1)

    optimizer.run_gradient_descent(1, 0.5, 0.001, 0.75, 5, np.random.default_rng(4))

    expected = math.log(3.0) + 2 * math.log(5.0) - 12.0
    assert optimizer.last_sweep_quality == pytest.approx(expected)


def test_sweep_estimate_lags_one_sweep_behind():
    network = _ring_with_chords()
    start = Layout(network.n_nodes)
    start.init_random_coordinates(np.random.default_rng(3))

    one_sweep = LayoutOptimizer(network, start.clone(), edge_weight_increment=0.1)
    one_sweep.run_gradient_descent(1, 0.5, 0.001, 0.75, 5, np.random.default_rng(11))
    two_sweeps = LayoutOptimizer(network, start.clone(), edge_weight_increment=0.1)
    two_sweeps.run_gradient_descent(2, 0.5, 0.001, 0.75, 5, np.random.default_rng(11))

    assert two_sweeps.last_sweep_quality == pytest.approx(
        one_sweep.calc_quality_function(), rel=1e-9
    )


def test_sweep_estimate_is_not_the_exact_quality():
    network = _ring_with_chords()
    optimizer = LayoutOptimizer(network, rng=np.random.default_rng(8))

    optimizer.run_gradient_descent(3, 0.5, 0.001, 0.75, 5, np.random.default_rng(8))

    # Pairs are counted when their first endpoint is visited, before later
    # moves in the same sweep, so the estimate lags the final positions.
    assert optimizer.last_sweep_quality is not None
    assert optimizer.last_sweep_quality != pytest.approx(optimizer.calc_quality_function(), rel=1e-9)


def test_network_is_not_modified():
    network = _ring_with_chords()
    snapshot = [
        network.node_weights.copy(),
        network.first_neighbor_indices.copy(),
        network.neighbors.copy(),
        network.edge_weights.copy(),
    ]
    optimizer = LayoutOptimizer(network, rng=np.random.default_rng(0), edge_weight_increment=0.2)
    optimizer.run_gradient_descent(20, 1.0, 0.001, 0.75, 5, np.random.default_rng(0))

    current = [network.node_weights, network.first_neighbor_indices, network.neighbors, network.edge_weights]
    for before, after in zip(snapshot, current):
        assert np.array_equal(before, after)
