from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Sequence

from ..config import load_config
from ..domain.models import ImageHandle
from ..errors import ConfigurationError, TransportError
from ..logging import get_logger
from ..service import ReceiptOcrService

LOG = get_logger("cli-main")

EXIT_OK = 0
EXIT_BAD_IMAGE = 1
EXIT_CONFIG = 2
EXIT_TRANSPORT = 3


def _load_image(path: str) -> ImageHandle | None:
    try:
        return ImageHandle.from_path(os.path.expanduser(path))
    except OSError as exc:
        LOG.error(f"Could not read image {path}: {exc}")
        return None


def _run(ns: argparse.Namespace, action) -> int:
    image = _load_image(ns.image)
    if image is None:
        return EXIT_BAD_IMAGE
    service = ReceiptOcrService(load_config(ns.dotenv_dir))
    try:
        output = action(service, image)
    except ConfigurationError as exc:
        LOG.error(str(exc))
        return EXIT_CONFIG
    except TransportError as exc:
        LOG.error(str(exc))
        return EXIT_TRANSPORT
    print(output)
    return EXIT_OK


def _handle_text(ns: argparse.Namespace) -> int:
    return _run(ns, lambda svc, img: svc.extract_plain_text(img, ns.instruction))


def _handle_receipt(ns: argparse.Namespace) -> int:
    def _extract(svc: ReceiptOcrService, img: ImageHandle) -> str:
        record = svc.extract_receipt(img)
        data = record.to_wire_dict() if ns.wire_keys else record.as_dict()
        return json.dumps(data, ensure_ascii=False, indent=2)

    return _run(ns, _extract)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receipt-ocr",
        description="Extract text or receipt data from an image with a vision chat model.",
    )
    parser.add_argument(
        "--dotenv-dir",
        default=os.getcwd(),
        help="Directory to start searching upwards for .env (default: current directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    text = subparsers.add_parser("text", help="Print all readable text in the image.")
    text.add_argument("--image", required=True, help="Path to a JPG/PNG/WEBP/GIF image")
    text.add_argument("--instruction", help="Replace the default OCR system prompt")
    text.set_defaults(handler=_handle_text)

    receipt = subparsers.add_parser("receipt", help="Print structured receipt fields as JSON.")
    receipt.add_argument("--image", required=True, help="Path to a JPG/PNG/WEBP/GIF image")
    receipt.add_argument(
        "--wire-keys",
        action="store_true",
        help="Use the model-facing key names (belge_numarasi, ...) in the output",
    )
    receipt.set_defaults(handler=_handle_receipt)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    provided = list(argv) if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(provided)
    code = args.handler(args)
    LOG.debug(f"Subcommand '{args.command}' finished with exit code {code}.")
    return code


if __name__ == "__main__":
    sys.exit(main())
