# This is the main entry point for the application.
import argparse
import logging
import random
import sys

import requests
from pydantic import ValidationError

from poly_painter.config import PainterConfig, Shape
from poly_painter.engine import Painter
from poly_painter.image_io import fetch_random_image, load_image, save_image, temp_file_name

logger = logging.getLogger("poly_painter")

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(verbose=False):
    level = logging.DEBUG if verbose else logging.INFO
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)


def build_parser():
    defaults = PainterConfig()
    p = argparse.ArgumentParser(
        prog="poly-painter",
        description="Paint a photo with randomly placed, shrinking polygons.",
    )
    p.add_argument("-i", "--input", default="",
                   help="Input file (if not specified the program grabs one from the internet)")
    p.add_argument("-q", "--query", default="blue", help="Query for the downloaded image")
    p.add_argument("-o", "--output", default=None,
                   help="Output PNG (default: <shape>_<random hex>.png)")
    p.add_argument("--cyclecount", type=int, default=5000, help="Number of shapes to paint")
    p.add_argument("-W", "-w", "--width", type=int, default=defaults.dest_width, help="Width")
    p.add_argument("-H", "--height", type=int, default=defaults.dest_height, help="Height")
    p.add_argument("--strokeratio", type=float, default=defaults.stroke_ratio)
    p.add_argument("--initialalpha", type=float, default=defaults.initial_alpha)
    p.add_argument("--strokereduction", type=float, default=defaults.stroke_reduction)
    p.add_argument("--alphaincrease", type=float, default=defaults.alpha_increase)
    p.add_argument("--strokeinversionthreshold", "--strokeinversiontreshold",
                   dest="strokeinversionthreshold", type=float,
                   default=defaults.stroke_inversion_threshold)
    p.add_argument("-j", "--jitter", type=int, default=defaults.stroke_jitter,
                   help="Stroke jitter (width / 10 seems a good starting point)")
    p.add_argument("--min", type=int, default=defaults.min_edge_count,
                   help="Minimal edge count for the polygons")
    p.add_argument("--max", type=int, default=defaults.max_edge_count,
                   help="Maximal edge count for the polygons")
    p.add_argument("-r", "--rotation", type=float, default=defaults.rotation_jitter,
                   help="Rotation jitter")
    p.add_argument("-s", "--shape", default=defaults.shape.value,
                   help="Shape of the elements: " + ", ".join(s.value for s in Shape))
    p.add_argument("--nofill", action="store_true", help="Don't fill the elements")
    p.add_argument("--nostroke", action="store_true",
                   help="Don't draw outlines around the elements")
    p.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every dab")
    return p


def config_from_args(args):
    return PainterConfig(
        dest_width=args.width,
        dest_height=args.height,
        stroke_ratio=args.strokeratio,
        initial_alpha=args.initialalpha,
        stroke_reduction=args.strokereduction,
        alpha_increase=args.alphaincrease,
        stroke_inversion_threshold=args.strokeinversionthreshold,
        stroke_jitter=args.jitter,
        min_edge_count=args.min,
        max_edge_count=args.max,
        rotation_jitter=args.rotation,
        shape=args.shape,
        fill=not args.nofill,
        stroke=not args.nostroke,
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    # 1. Validate the configuration before touching any image
    try:
        config = config_from_args(args)
    except ValidationError as e:
        logger.error("Invalid configuration:\n%s", e)
        return 2
    if args.cyclecount < 0:
        logger.error("--cyclecount must not be negative, got %d", args.cyclecount)
        return 2

    # 2. Acquire the source image
    try:
        if args.input:
            source = load_image(args.input)
        else:
            source = fetch_random_image(config.dest_width, config.dest_height, args.query)
    except (FileNotFoundError, ValueError, requests.RequestException) as e:
        logger.error("Error: %s", e)
        return 1

    # 3. Run the painting process
    painter = Painter(source, config, rng=random.Random(args.seed))
    painter.run(args.cyclecount, progress_every=max(1, args.cyclecount // 10))

    # 4. Save the final canvas
    output_path = args.output or temp_file_name(config.shape.value + "_", ".png")
    try:
        save_image(painter.output(), output_path)
    except OSError as e:
        logger.error("Error: %s", e)
        return 1

    logger.info("Painting complete. Output saved to %s", output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
