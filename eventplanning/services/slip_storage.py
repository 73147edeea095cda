"""
File storage for payment slips.
"""

import re
import uuid
from pathlib import Path
from typing import Optional
import logging

from eventplanning.core.config import config

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads/slips"


class SlipStorage:
    """Stores uploaded slips on the local filesystem under unique names."""

    def __init__(self, upload_dir: Optional[str] = None, max_bytes: Optional[int] = None):
        self.upload_dir: Optional[Path] = Path(upload_dir) if upload_dir else None
        self.max_bytes = max_bytes

    async def get_max_bytes(self) -> int:
        """Largest slip accepted, from SLIP_MAX_BYTES unless given explicitly."""
        if self.max_bytes is None:
            self.max_bytes = await config.get_slip_max_bytes()
        return self.max_bytes

    async def _get_upload_dir(self) -> Path:
        if self.upload_dir is None:
            self.upload_dir = Path(await config.get_slip_upload_dir())
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        return self.upload_dir

    @staticmethod
    def _safe_name(original_name: Optional[str]) -> str:
        name = Path(original_name or "slip").name
        return re.sub(r"[^A-Za-z0-9._-]", "_", name) or "slip"

    async def save(self, content: bytes, original_name: Optional[str]) -> str:
        """
        Write a slip and return its public path.

        Args:
            content: Raw file bytes
            original_name: File name supplied by the client

        Returns:
            Path under /uploads/slips identifying the stored file
        """
        stored_name = f"{uuid.uuid4().hex}_{self._safe_name(original_name)}"
        stored_path = await self._get_upload_dir() / stored_name
        stored_path.write_bytes(content)
        logger.info(f"Stored payment slip {stored_name} ({len(content)} bytes)")
        return f"{PUBLIC_PREFIX}/{stored_name}"

    async def delete(self, public_path: str) -> None:
        """Remove a stored slip; missing files are ignored."""
        stored_path = await self._get_upload_dir() / Path(public_path).name
        stored_path.unlink(missing_ok=True)


# Global slip storage instance
slip_storage = SlipStorage()
