"""Command line entry point: open the viewer, or render one frame to a file."""

import argparse
import logging
from typing import List, Optional

from .app import run, save_image
from .colormaps import list_palette_names
from .config import load_settings, snapshot_from_settings
from .logging_setup import configure_logging, get_logger
from .params import ViewportParameters
from .renderer import MandelbrotRenderer, default_worker_count


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fractalview", description="Interactive Mandelbrot set viewer.")
    p.add_argument("--settings", type=str, default=None, help="Path to a settings JSON file (defaults to the packaged settings.json).")
    p.add_argument("--width", type=int, default=None, help="Window or image width in pixels.")
    p.add_argument("--height", type=int, default=None, help="Window or image height in pixels.")
    p.add_argument("--depth", type=int, default=None, help="Maximum iteration count.")
    p.add_argument("--palette", type=str, default=None, choices=list_palette_names(), help="Color palette.")
    p.add_argument("--sequential", action="store_true", help="Render on a single thread.")
    p.add_argument("--save", type=str, default=None, metavar="PATH", help="Render one frame to PATH and exit without opening a window.")
    p.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level.")
    p.add_argument("--log-file", type=str, default=None, help="Rotating log file path. Omit to log to the console only.")
    return p


def build_renderer(settings, sequential=False) -> MandelbrotRenderer:
    params = ViewportParameters(snapshot_from_settings(settings))
    workers = default_worker_count(settings["worker_multiplier"])
    return MandelbrotRenderer(params, workers=workers, sequential=sequential)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    configure_logging(level=getattr(logging, args.log_level), log_file=args.log_file)
    logger = get_logger()

    try:
        settings = load_settings(args.settings, width=args.width, height=args.height,
                                 depth=args.depth, palette=args.palette)
        renderer = build_renderer(settings, sequential=args.sequential)
    except ValueError as e:
        logger.error("Invalid settings: %s", e)
        return 2

    if args.save:
        image = renderer.render(settings["width"], settings["height"])
        logger.info("Rendered %sx%s in %.3fs", settings["width"], settings["height"],
                    renderer.last_render_seconds)
        save_image(image, args.save)
        return 0

    run(renderer, settings["width"], settings["height"])
    return 0
