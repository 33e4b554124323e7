import argparse
import logging
import sys
from typing import List, Optional

from procgen import DEFAULT_SKEW_STEP, InvalidInputError, Seed, TiledWorldTerrain

logger = logging.getLogger("procgen.Main")
logger.addHandler(logging.NullHandler())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Preview or sample the tiled procedural terrain.")
    parser.add_argument(
        "--seed", type=int, default=0,
        help="Root seed value (default: 0)"
    )
    parser.add_argument(
        "--skew", type=float, default=0.0,
        help="Initial skew (time) carried by the seed (default: 0.0)"
    )
    parser.add_argument(
        "--skew-step", type=float, default=DEFAULT_SKEW_STEP,
        help=f"Skew added per preview frame (default: {DEFAULT_SKEW_STEP})"
    )
    parser.add_argument(
        "--radius", type=int, default=20,
        help="Hex radius of the preview patch (default: 20)"
    )
    parser.add_argument(
        "--sample", type=float, nargs=2, metavar=("X", "Y"),
        help="Print the terrain values at one point and exit without opening a window"
    )
    parser.add_argument(
        "--log-level", type=str, default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level"
    )
    return parser


def format_sample(point, sample) -> str:
    return (
        f"point=({point[0]:.4f}, {point[1]:.4f}) biome={sample.biome.value} glyph={sample.glyph!r} "
        f"height={sample.height:.4f} precipitation={sample.precipitation:.4f} "
        f"temperature={sample.temperature:.4f} texture={sample.texture:.4f}"
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point. Returns exit code 0 on success, 1 on invalid input.
    """
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    seed = Seed.new(args.seed, args.skew)
    try:
        terrain = TiledWorldTerrain()
        if args.sample:
            sample = terrain.sample(seed, args.sample)
            print(format_sample(args.sample, sample))
            return 0
    except InvalidInputError as e:
        logger.error("Invalid input: %s", e)
        return 1

    # Imported here so sampling works without a display backend.
    from ui.map_view import MapView

    view = MapView(terrain, seed, radius=args.radius, skew_step=args.skew_step)
    final_seed = view.run()
    logger.info("Preview closed at %s", final_seed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
