"""
Local upload storage.

Stores uploaded files under a per-tenant directory so the background
ingestion worker can read them after the request has returned.

Dependencies: pathlib (stdlib)
System role: Raw document storage
"""

import logging
import re
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    Args:
        filename: Original filename from the upload

    Returns:
        str: Basename containing only letters, digits, dot, dash and underscore
    """
    name = Path(filename.replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    return name or "upload"


class FileStore:
    """Save and remove uploaded documents on local disk."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def save(self, tenant_id: str, filename: str, data: bytes) -> Path:
        """
        Write an upload to disk under a unique name.

        Args:
            tenant_id: Owning tenant (used as the sub-directory)
            filename: Original filename
            data: File content

        Returns:
            Path: Where the file was written
        """
        tenant_dir = self._root / sanitize_filename(tenant_id)
        tenant_dir.mkdir(parents=True, exist_ok=True)
        path = tenant_dir / f"{uuid.uuid4().hex}_{sanitize_filename(filename)}"
        path.write_bytes(data)
        logger.info(
            f"{__name__}:save - Stored upload",
            extra={"tenant_id": tenant_id, "path": str(path), "size": len(data)},
        )
        return path

    def delete(self, path: str | Path | None) -> bool:
        """
        Remove a stored file. Missing files are ignored.

        Returns:
            bool: True if a file was removed
        """
        if not path:
            return False
        target = Path(path)
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        logger.info(f"{__name__}:delete - Removed upload", extra={"path": str(target)})
        return True
