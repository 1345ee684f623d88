"""Release archive handling.

Release archives are zip files. Only the single server binary is read out
of them; nothing else in the archive is written to disk.
"""

from __future__ import annotations

import io
import zipfile
from pathlib import PurePosixPath

from zap_launcher.core.errors import BinaryNotFoundInArchive, DownloadFailed
from zap_launcher.core.logging import get_logger

LOGGER = get_logger(__name__)

# Refuse to inflate anything larger than this (zip bomb guard)
MAX_BINARY_SIZE = 512 * 1024 * 1024


def extract_binary(archive_bytes: bytes, binary_file_name: str) -> bytes:
    """Return the contents of ``binary_file_name`` from a zip archive.

    The entry list is scanned linearly and the first file entry whose final
    path component equals ``binary_file_name`` is read. Entries may appear
    in any order and the archive may hold other files.

    Args:
        archive_bytes: Raw zip archive.
        binary_file_name: Expected file name, e.g. ``zap-language-server.exe``.

    Raises:
        DownloadFailed: If the bytes are not a readable zip archive.
        BinaryNotFoundInArchive: If no entry has the expected name.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(archive_bytes)) as archive:
            for member in archive.infolist():
                if member.is_dir():
                    continue
                # Zip entry names always use forward slashes
                if PurePosixPath(member.filename).name != binary_file_name:
                    continue
                if member.file_size > MAX_BINARY_SIZE:
                    raise DownloadFailed(
                        f"Archive entry {member.filename} is too large "
                        f"({member.file_size} > {MAX_BINARY_SIZE} bytes)"
                    )
                LOGGER.debug(
                    f"Extracting {member.filename} ({member.file_size} bytes) from archive"
                )
                return archive.read(member)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError) as e:
        raise DownloadFailed(f"Failed to read release archive: {e}") from e

    raise BinaryNotFoundInArchive(binary_file_name)
