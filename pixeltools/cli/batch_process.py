import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

# Load environment variables first
load_dotenv()

from ..models.pixel_buffer import PixelBuffer
from ..pipeline.background_remover import remove_backgrounds
from ..pipeline.compressor import compress_gallery
from ..pipeline.filter_applier import apply_filter_preset
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)

OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT", ".png")
_EXTENSIONS = {"jpeg": ".jpg", "jpg": ".jpg", "png": ".png", "webp": ".webp"}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixeltools-batch",
        description="Run one pixeltools operation over every image in a folder.",
    )
    sub = parser.add_subparsers(dest="tool", required=True)

    bg = sub.add_parser("remove-bg", help="Remove backgrounds (writes PNG).")
    bg.add_argument("--algorithm", choices=["color", "clustering", "contrast", "hybrid"], default="hybrid")
    bg.add_argument("--threshold", type=float, default=50)
    bg.add_argument("--softness", type=float, default=0)
    bg.add_argument("--cluster-threshold", type=float, default=50)

    flt = sub.add_parser("filter", help="Apply a built-in filter preset.")
    flt.add_argument("--preset", default="Original")

    cmp_ = sub.add_parser("compress", help="Downscale and re-encode.")
    cmp_.add_argument("--quality", type=int, default=80)
    cmp_.add_argument("--max-width", type=int, default=None)
    cmp_.add_argument("--max-height", type=int, default=None)
    cmp_.add_argument("--format", dest="fmt", choices=["jpeg", "png", "webp"], default="jpeg")

    for p in (bg, flt, cmp_):
        p.add_argument("input", type=Path, help="Folder with source images.")
        p.add_argument("output", type=Path, help="Folder for results (created if missing).")
        p.add_argument("--recursive", action="store_true")
    return parser


def _process(args: argparse.Namespace, buffer: PixelBuffer, image_service: ImageService) -> None:
    """Run the selected tool on one buffer and write its result."""
    if args.tool == "remove-bg":
        [result] = remove_backgrounds(
            [buffer],
            algorithm=args.algorithm,
            threshold=args.threshold,
            softness=args.softness,
            cluster_threshold=args.cluster_threshold,
        )
        image_service.save(image_service.relocate(result, args.output, ".png"))

    elif args.tool == "filter":
        [result] = apply_filter_preset([buffer], args.preset)
        image_service.save(image_service.relocate(result, args.output, OUTPUT_EXT))

    else:
        [result] = compress_gallery(
            [buffer],
            quality=args.quality,
            max_width=args.max_width,
            max_height=args.max_height,
            fmt=args.fmt,
        )
        stem = Path(buffer.path).stem if buffer.path else "image"
        (args.output / f"{stem}{_EXTENSIONS[args.fmt]}").write_bytes(result.data)


def run(args: argparse.Namespace, image_service: ImageService) -> int:
    if args.tool == "filter":
        # unknown preset fails before any image is read
        apply_filter_preset([], args.preset)
    args.output.mkdir(parents=True, exist_ok=True)

    # one image in memory at a time
    count = 0
    for buffer in tqdm(image_service.stream_gallery(args.input, recursive=args.recursive),
                       desc=args.tool, ncols=70):
        _process(args, buffer, image_service)
        count += 1

    logger.info(f"Wrote {count} results from {args.input} to {args.output}")
    return 0


def main(argv=None) -> int:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )
    args = _build_parser().parse_args(argv)

    if not args.input.is_dir():
        logger.error(f"Input folder does not exist: {args.input}")
        return 2

    try:
        return run(args, ImageService())
    except (OSError, ValueError, KeyError) as err:
        logger.error(f"{args.tool} failed: {err}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
