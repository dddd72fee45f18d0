#!/usr/bin/env python
"""Remove the background of a single image from the command line."""
from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path

from app.config import check_credentials, get_settings
from app.models import FileInput, UrlInput
from app.services.ai import get_remover
from app.services.normalizer import decode_data_uri
from app.services.pipeline import process_submission


def main() -> int:
    parser = argparse.ArgumentParser(description="Remove an image background with the configured AI provider")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="http(s) URL of the image")
    source.add_argument("--file", type=Path, help="local JPEG, PNG or WEBP image")
    parser.add_argument("--output", type=Path, help="where to write the processed PNG")
    args = parser.parse_args()

    check_credentials(get_settings())

    if args.url is not None:
        submission = UrlInput(url=args.url)
    else:
        content_type, _ = mimetypes.guess_type(args.file.name)
        submission = FileInput.from_bytes(
            args.file.read_bytes(), content_type=content_type, filename=args.file.name
        )

    result = asyncio.run(process_submission(submission, get_remover()))
    print(result.model_dump_json(indent=2, exclude={"original_image_ref", "processed_image_ref"}))

    if result.error_message is not None:
        print(f"Error: {result.error_message}", file=sys.stderr)
        return 1
    if args.output is not None:
        _, data = decode_data_uri(result.processed_image_ref, enforce_limits=False)
        args.output.write_bytes(data)
        print(f"Wrote {len(data)} bytes to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
