"""
Command line front end for the upload client.

Usage:
    python -m upload_client upload <file_path> [--content-type TYPE]
    python -m upload_client list
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from upload_client.clients import file_service_client
from upload_client.core.config import settings
from upload_client.core.exceptions import FileServiceError
from upload_client.core.http import create_http_client
from upload_client.models.local_file import LocalFile
from upload_client.upload.coordinator import UploadCoordinator, UploadStatus
from upload_schemas.files import UploadedFile

logger = logging.getLogger(__name__)


def format_file_table(files: List[UploadedFile]) -> str:
    """Render the listing as name, size in MB, upload date and download URL."""
    if not files:
        return "No files uploaded yet."

    lines = [f"{'File Name':<48} {'Size (MB)':>10}  {'Uploaded':<19}  Download"]
    for f in files:
        lines.append(
            f"{f.file_name:<48} {f.file_size / (1024 * 1024):>10.2f}  "
            f"{f.upload_date.strftime('%Y-%m-%d %H:%M:%S'):<19}  {f.download_url}"
        )
    return "\n".join(lines)


def print_progress(value: Optional[int]) -> None:
    if value is not None:
        print(f"Upload Progress: {value}%")


def print_status(status: UploadStatus, message: str) -> None:
    if message:
        print(message)


async def run_upload(path: str, content_type: Optional[str]) -> int:
    file = LocalFile.from_path(path, content_type=content_type)

    async with create_http_client() as client:
        coordinator = UploadCoordinator(client)
        coordinator.add_progress_listener(print_progress)
        coordinator.add_status_listener(print_status)

        coordinator.select_file(file)
        download_url = await coordinator.begin_upload()

        if coordinator.status != UploadStatus.SUCCEEDED:
            return 1

        print(f"Download: {download_url}")

        # Refresh the listing, as the file list does after each upload
        try:
            files = await file_service_client.list_files(client)
        except FileServiceError:
            print("Failed to fetch files")
            return 0
        print(format_file_table(files))

    return 0


async def run_list() -> int:
    async with create_http_client() as client:
        try:
            files = await file_service_client.list_files(client)
        except FileServiceError:
            print("Failed to fetch files")
            return 1

    print(format_file_table(files))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="upload_client", description="Chunked multipart uploads to S3")
    subcommands = parser.add_subparsers(dest="command", required=True)

    upload = subcommands.add_parser("upload", help="Upload a file")
    upload.add_argument("path", help="File to upload")
    upload.add_argument("--content-type", default=None, help="MIME type (guessed from the extension by default)")

    subcommands.add_parser("list", help="List uploaded files")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.command == "upload":
        try:
            return asyncio.run(run_upload(args.path, args.content_type))
        except FileNotFoundError as e:
            print(e)
            return 1

    return asyncio.run(run_list())


if __name__ == "__main__":
    sys.exit(main())
