"""Local filesystem storage for uploaded issue media."""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from civic_reporter import config

logger = logging.getLogger(__name__)


@dataclass
class StoredMedia:
    """Where an uploaded file ended up, plus what the client told us about it."""

    url: str
    filename: str
    content_type: str


class LocalMediaStorage:
    def __init__(self, upload_dir: str | Path):
        self.upload_dir = Path(upload_dir)

    async def save(self, upload: UploadFile) -> StoredMedia:
        """Write the upload under a random name, keeping its extension."""
        filename = upload.filename or "upload"
        file_ext = os.path.splitext(filename)[1].lower()
        path = self.upload_dir / f"{uuid.uuid4()}{file_ext}"

        content = await upload.read()
        await asyncio.to_thread(self._write, path, content)

        logger.info(
            "Stored uploaded media",
            extra={"path": str(path), "size_bytes": len(content)},
        )
        return StoredMedia(
            url=str(path),
            filename=filename,
            content_type=upload.content_type or "application/octet-stream",
        )

    def _write(self, path: Path, content: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)


def get_media_storage() -> LocalMediaStorage:
    return LocalMediaStorage(config.UPLOAD_DIR)
