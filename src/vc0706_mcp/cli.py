"""Snapshot command: open the camera, print its version, save one photo."""

from __future__ import annotations

import argparse
import logging
import sys

from .camera import open_camera
from .config import CameraConfig
from .exceptions import CameraError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vc0706-snap",
        description="Take a single photo with a VC0706 serial camera.",
    )
    parser.add_argument("-p", "--port", help="serial device (default: $VC0706_PORT or /dev/ttyAMA0)")
    parser.add_argument("-b", "--baudrate", type=int, help="baud rate (default: 38400)")
    parser.add_argument(
        "-s", "--size", default=None,
        help="photo size: large, medium or small (default: leave as is)",
    )
    parser.add_argument("-o", "--output", default="test.jpg", help="output file")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = CameraConfig.from_env(port=args.port, baudrate=args.baudrate)
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    try:
        conn, camera = open_camera(config)
    except CameraError as e:
        logger.error("%s", e)
        return 1

    with conn:
        try:
            print(camera.get_version())
            if args.size is not None:
                camera.set_photo_size(args.size)
            image = camera.capture()
        except CameraError as e:
            logger.error("Capture failed: %s", e)
            return 1

    path = image.save(args.output)
    if not image.is_jpeg:
        logger.warning("Downloaded data does not look like a JPEG")
    logger.info("Saved %d bytes to %s", image.size, path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
