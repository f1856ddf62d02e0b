"""Scratch storage for transient uploads.

Uploaded bytes are written under the configured scratch directory using
the original base filename, read back once for extraction and deleted.
Two concurrent uploads with the same filename share one path; this is
a known limitation.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def scratch_path(upload_dir: str | Path, filename: str) -> Path:
    """Return the scratch path for *filename*, dropping any directory parts."""
    name = Path(filename.replace("\\", "/")).name
    if not name or name in (".", ".."):
        raise ValueError(f"Invalid upload filename: {filename!r}")
    return Path(upload_dir) / name


def write_scratch_file(upload_dir: str | Path, filename: str, content: bytes) -> Path:
    """Persist *content* and return the path it was written to."""
    path = scratch_path(upload_dir, filename)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger.info("Saved upload to scratch: %s (%d bytes)", path, len(content))
    return path


def delete_scratch_file(path: str | Path) -> bool:
    """Delete a scratch file.  Returns False if it could not be removed."""
    local_path = Path(path)
    try:
        local_path.unlink()
    except FileNotFoundError:
        return False
    except OSError as exc:
        logger.error("Error deleting file %s: %s", local_path, exc)
        return False
    logger.info("Deleted temporary file: %s", local_path)
    return True
