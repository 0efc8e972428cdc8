import argparse
import logging
from typing import Optional, Sequence

import numpy as np

from voslayout import Layout, LayoutPersistenceError, load_layout, save_layout

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _cmd_init(args: argparse.Namespace) -> None:
    layout = Layout(args.n_nodes)
    layout.init_random_coordinates(np.random.default_rng(args.seed))
    save_layout(layout, args.output)


def _cmd_stats(args: argparse.Namespace) -> None:
    layout = load_layout(args.path)
    print(f"nodes: {layout.n_nodes}")
    if layout.n_nodes == 0:
        return
    low = layout.get_min_coordinates()
    high = layout.get_max_coordinates()
    print(f"min: {low[0]:.6f} {low[1]:.6f}")
    print(f"max: {high[0]:.6f} {high[1]:.6f}")
    if layout.n_nodes >= 2:
        print(f"average distance: {layout.get_average_distance():.6f}")


def _transform(args: argparse.Namespace, apply) -> None:
    layout = load_layout(args.path)
    apply(layout)
    save_layout(layout, args.output or args.path)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Create and post-process VOS layouts")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    init = commands.add_parser("init", help="Write a layout with random coordinates")
    init.add_argument("n_nodes", type=int, help="Number of nodes")
    init.add_argument("output", help="Path of the layout file to write")
    init.add_argument("--seed", type=int, help="Random seed (default: unseeded)")
    init.set_defaults(handler=_cmd_init)

    stats = commands.add_parser("stats", help="Print coordinate ranges and average distance")
    stats.add_argument("path", help="Path of the layout file")
    stats.set_defaults(handler=_cmd_stats)

    standardize = commands.add_parser(
        "standardize", help="Center, rotate onto principal axes and rescale"
    )
    standardize.add_argument("path", help="Path of the layout file")
    standardize.add_argument("--output", help="Write here instead of overwriting the input")
    standardize.add_argument(
        "--no-distances",
        action="store_true",
        help="Do not rescale to unit average distance",
    )
    standardize.set_defaults(
        handler=lambda a: _transform(a, lambda layout: layout.standardize_coordinates(not a.no_distances))
    )

    rotate = commands.add_parser("rotate", help="Rotate by -ANGLE degrees about the origin")
    rotate.add_argument("path", help="Path of the layout file")
    rotate.add_argument("angle", type=float, help="Angle in degrees")
    rotate.add_argument("--output", help="Write here instead of overwriting the input")
    rotate.set_defaults(handler=lambda a: _transform(a, lambda layout: layout.rotate(a.angle)))

    flip = commands.add_parser("flip", help="Mirror the layout along one axis")
    flip.add_argument("path", help="Path of the layout file")
    flip.add_argument("dimension", type=int, choices=[0, 1], help="Axis to negate")
    flip.add_argument("--output", help="Write here instead of overwriting the input")
    flip.set_defaults(handler=lambda a: _transform(a, lambda layout: layout.flip(a.dimension)))

    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    try:
        args.handler(args)
    except LayoutPersistenceError as exc:
        logger.error("%s", exc)
        raise SystemExit(1)


if __name__ == "__main__":
    main()
