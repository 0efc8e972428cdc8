"""Example: lay out a small co-occurrence network and print the map."""

import logging

from voslayout import GradientDescentOptions, LayoutOptions, Network, optimize_layout

LABELS = ["network", "layout", "citation", "journal", "author", "cluster"]

# Every edge is listed from both endpoints.
NETWORK = Network(
    node_weights=[4.0, 2.0, 3.0, 2.0, 2.0, 1.0],
    first_neighbor_indices=[0, 3, 5, 8, 10, 12, 14],
    neighbors=[1, 2, 5, 0, 5, 0, 3, 4, 2, 4, 2, 3, 0, 1],
    edge_weights=[3.0, 1.0, 2.0, 3.0, 1.0, 1.0, 4.0, 2.0, 4.0, 1.0, 2.0, 1.0, 2.0, 1.0],
)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")
    options = LayoutOptions(
        random_starts=5,
        random_seed=123,
        gradient_descent=GradientDescentOptions(max_iterations=500),
    )
    result = optimize_layout(NETWORK, options)
    print("Quality:", result.quality)
    print("Best start:", result.start_index)
    coords = result.layout.get_coordinates()
    for node, label in enumerate(LABELS):
        print(f"{label}: ({coords[0, node]:.4f}, {coords[1, node]:.4f})")


if __name__ == "__main__":
    main()
