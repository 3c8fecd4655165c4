import argparse
import json
import logging
import sys

from . import __version__
from .dates import parse_date
from .errors import BingpotError
from .pipeline import get_images, save_images_by_offset, save_wallpaper

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _iso_date(text):
    try:
        return parse_date(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO date (YYYY-MM-DD): {text!r}")


def build_parser():
    p = argparse.ArgumentParser(prog="bingpot")
    p.add_argument("--version", action="version", version=f"bingpot {__version__}")
    p.add_argument(
        "--log-level",
        default="INFO",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Set logging level",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    p_dates = sub.add_parser("dates", help="Save the image of each date as <offset>.jpg.")
    p_dates.add_argument("--date", action="append", required=True, type=_iso_date,
                         help="ISO date (YYYY-MM-DD), can be given multiple times.")

    p_range = sub.add_parser("range", help="Save images for a range of day offsets.")
    p_range.add_argument("--start", type=int, default=8,
                         help="First offset (days before today).")
    p_range.add_argument("--stop", type=int, default=16,
                         help="Offset to stop before.")

    sub.add_parser("today", help="Save today's image as wallpaper.jpg.")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.cmd == "dates":
            res = get_images(dates=args.date)
        elif args.cmd == "range":
            res = save_images_by_offset(range(args.start, args.stop))
        else:
            res = {"wallpaper": save_wallpaper()}
    except BingpotError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(res, indent=2))
    return 0


def run():
    sys.exit(main())
