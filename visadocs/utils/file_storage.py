"""
Template file storage on local disk.

Files live under ``<uploads_dir>/templates`` and are referenced in the
database by their path relative to ``uploads_dir``. Stored names get a
millisecond timestamp suffix so two uploads of ``form.pdf`` never collide.
"""

import logging
import os
import re
import time
from pathlib import Path

from visadocs.core.config import get_settings
from visadocs.core.errors import NotFoundError

logger = logging.getLogger(__name__)

TEMPLATES_SUBDIR = "templates"


def _uploads_root() -> Path:
    return Path(get_settings().uploads_dir)


def _safe_stem(filename: str) -> str:
    stem = Path(filename).stem
    return re.sub(r"[^A-Za-z0-9._-]+", "_", stem).strip("._") or "template"


def save_template_file(content: bytes, filename: str) -> str:
    """Write a template file and return its path relative to the uploads root."""
    directory = _uploads_root() / TEMPLATES_SUBDIR
    directory.mkdir(parents=True, exist_ok=True)

    ext = Path(filename).suffix.lower()
    stored_name = f"{_safe_stem(filename)}_{int(time.time() * 1000)}{ext}"
    (directory / stored_name).write_bytes(content)

    logger.info("Stored template %s (%s)", stored_name, format_file_size(len(content)))
    return f"{TEMPLATES_SUBDIR}/{stored_name}"


def resolve_template_path(relative_path: str) -> Path:
    """Absolute path of a stored template; refuses paths escaping the uploads root."""
    root = _uploads_root().resolve()
    path = (root / relative_path).resolve()
    if root not in path.parents:
        raise NotFoundError("Template file not found")
    return path


def read_template_file(relative_path: str) -> bytes:
    path = resolve_template_path(relative_path)
    if not path.is_file():
        raise NotFoundError("Template file not found")
    return path.read_bytes()


def delete_template_file(relative_path: str) -> bool:
    """Best-effort delete. Returns False (and logs) instead of raising."""
    try:
        os.remove(resolve_template_path(relative_path))
        return True
    except (OSError, NotFoundError) as e:
        logger.warning("Could not delete template file %s: %s", relative_path, e)
        return False


def format_file_size(size: int) -> str:
    """Human readable size, e.g. ``1.5 MB``."""
    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(size)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"
