"""Headless runner for BubbleMap.

Builds a diagram, lets the physics settle for a number of ticks and prints
where every bubble ended up. Useful for tuning settings without a display.

Usage:
  bubblemap-simulate --nodes 6 --connect --ticks 300
  bubblemap-simulate --nodes 4 --long-press 1 --png diagram.png
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bubblemap.config import load_settings
from bubblemap.interaction import InteractionController
from bubblemap.logging_config import setup_logging
from bubblemap.scheduling import ManualScheduler
from bubblemap.simulation import Simulation

logger = logging.getLogger(__name__)


def build_simulation(args: argparse.Namespace) -> tuple[Simulation, InteractionController, ManualScheduler]:
    settings = load_settings(Path(args.settings)) if args.settings else load_settings()
    sim = Simulation(args.width, args.height, settings=settings, seed=args.seed)
    scheduler = ManualScheduler()
    controller = InteractionController(sim, scheduler)

    previous = None
    for _ in range(args.nodes):
        node = sim.add_node()
        if args.connect and previous is not None:
            sim.add_edge(previous, node)
        previous = node
    return sim, controller, scheduler


def long_press(controller: InteractionController, scheduler: ManualScheduler, index: int) -> bool:
    """Press and hold on the bubble at `index` until the long-press fires."""
    nodes = controller.simulation.nodes
    if not 0 <= index < len(nodes):
        logger.warning("No bubble at index %d, skipping long-press", index)
        return False
    target = nodes[index]
    if controller.pointer_down(target.x, target.y) is not target:
        logger.warning("%s is covered by another bubble, skipping long-press", target.label)
        controller.pointer_up()
        return False
    scheduler.advance(controller.simulation.settings.long_press_ms)
    controller.pointer_up()
    return True


def run(args: argparse.Namespace) -> int:
    sim, controller, scheduler = build_simulation(args)

    for index in args.long_press or []:
        long_press(controller, scheduler, index)

    sim.run(args.ticks)

    for node in sim.nodes:
        print(f"{node.label:<12} x={node.x:8.2f} y={node.y:8.2f} "
              f"vx={node.vx:7.3f} vy={node.vy:7.3f}")
    for edge in sim.edges:
        print(f"{edge.source.label} -> {edge.target.label}: length {edge.length():.2f}")

    if args.png:
        from bubblemap.export import DiagramExporter

        if not DiagramExporter().export_png(sim.snapshot(), args.png):
            print("Nothing to export")
            return 1
        print(f"Wrote image: {Path(args.png).expanduser().resolve()}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="bubblemap-simulate")
    parser.add_argument("--nodes", type=int, default=5, help="Number of bubbles to add")
    parser.add_argument("--ticks", type=int, default=240, help="Frames to simulate")
    parser.add_argument("--width", type=float, default=800, help="Canvas width")
    parser.add_argument("--height", type=float, default=600, help="Canvas height")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for placement")
    parser.add_argument(
        "--connect",
        action="store_true",
        help="Chain each new bubble to the previous one",
    )
    parser.add_argument(
        "--long-press",
        type=int,
        action="append",
        metavar="INDEX",
        help="Long-press the bubble at INDEX before running (repeatable)",
    )
    parser.add_argument("--settings", help="Path to a settings JSON file")
    parser.add_argument("--png", help="Write the final frame to this PNG path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output")

    args = parser.parse_args(argv)
    if args.nodes < 0 or args.ticks < 0:
        parser.error("--nodes and --ticks must be >= 0")

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return run(args)
    except ValueError as exc:
        parser.exit(2, f"bubblemap-simulate: error: {exc}\n")


if __name__ == "__main__":
    raise SystemExit(main())
