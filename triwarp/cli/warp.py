import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.errors import WarpError
from ..models.warp_options import WarpOptions
from ..pipeline.warp_image import warp_image
from ..repositories.triangle_repository import TriangleRepository

logger = logging.getLogger(__name__)


def _size(text: str):
    try:
        width, height = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Size must look like 400x300, got {text!r}")
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"Size must be positive, got {text!r}")
    return width, height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="triwarp-warp",
        description="Warp a triangle of an image onto another triangle (barycentric texture mapping).",
    )
    parser.add_argument("input", help="Source image (anything OpenCV can read)")
    parser.add_argument("output", help="Where to write the warped image")
    parser.add_argument("--source-triangle", required=True,
                        help="Source corners as 'x,y;x,y;x,y' or JSON")
    parser.add_argument("--destination-triangle", required=True,
                        help="Destination corners as 'x,y;x,y;x,y' or JSON")
    parser.add_argument("--size", type=_size, default=None,
                        help="Output size WIDTHxHEIGHT (default: source size)")
    parser.add_argument("--background", default=None,
                        help="Fill for pixels outside the triangle, e.g. '255,255,255,255'")
    parser.add_argument("--sampling", choices=["nearest", "bilinear"], default=None,
                        help="Sampling mode (default: WARP_SAMPLING or nearest)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Row-band worker threads (default: WARP_WORKERS or 1)")
    parser.add_argument("--preview", default=None,
                        help="Also write the source viewport preview to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if not Path(args.input).is_file():
        print(f"Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        env_options = WarpOptions.from_env()
        options = WarpOptions(
            background=args.background or env_options.background,
            sampling=args.sampling or env_options.sampling,
            workers=args.workers if args.workers is not None else env_options.workers,
        )
        source_triangle = TriangleRepository.from_text(args.source_triangle)
        destination_triangle = TriangleRepository.from_text(args.destination_triangle)

        warp_image(
            args.input,
            source_triangle,
            destination_triangle,
            args.output,
            size=args.size,
            options=options,
            preview_path=args.preview,
        )
    except (WarpError, FileNotFoundError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    print(f"Warped image written to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
