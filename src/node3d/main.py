"""Main entry point for node3d."""

import argparse
import logging

import numpy as np

from .core.node import TransformNode
from .scenes import create_arm_scene, create_solar_scene

# Scene registry - maps scene names to factory functions
SCENES = {
    "arm": create_arm_scene,
    "solar": create_solar_scene,
}


def _format_vec(vec: np.ndarray) -> str:
    return "(" + ", ".join(f"{v:.3f}" for v in vec) + ")"


def describe(root: TransformNode, order: str = "depth") -> list[str]:
    """Describe each node in the hierarchy, one line per node.

    Args:
        root: Root of the hierarchy to describe
        order: "depth" or "breadth" traversal order

    Returns:
        Lines with id, local position, summed global position and
        world translation, indented by depth
    """
    lines: list[str] = []

    def visit(node: TransformNode) -> None:
        indent = "  " * node.depth
        lines.append(
            f"{indent}- node {node.id}: local={_format_vec(node.get_position())}"
            f" summed={_format_vec(node.get_global_position())}"
            f" world={_format_vec(node.get_global_translation())}"
        )

    if order == "breadth":
        root.traverse_breadth_first(visit)
    else:
        root.traverse_depth_first(visit)
    return lines


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="node3d - Hierarchical 3D transform nodes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-s", "--scene",
        choices=list(SCENES.keys()),
        default="arm",
        help="Hierarchy to display (default: arm)",
    )
    parser.add_argument(
        "--order",
        choices=["depth", "breadth"],
        default="depth",
        help="Traversal order (default: depth)",
    )
    parser.add_argument(
        "--rotate-y",
        metavar="DEGREES",
        type=float,
        default=0.0,
        help="Rotate the root about its Y axis before printing",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Run the node3d demo."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = SCENES[args.scene]()
    if args.rotate_y:
        root.rotate_y(np.radians(args.rotate_y))

    nodes = list(root.iter_depth_first())
    print("node3d - Hierarchical 3D transform nodes")
    print("=" * 40)
    print(f"Scene '{args.scene}' contains {len(nodes)} nodes ({args.order}-first):")
    for line in describe(root, args.order):
        print(line)


if __name__ == "__main__":
    main()
