"""
Local audio asset storage.

Owns the uploads directory served under ``/uploads``: synthesized prompts
and recorded answers live in ``<uploads_dir>/audio`` with time-plus-random
filenames so concurrent writers never collide.
"""
import logging
import time
import uuid
from pathlib import Path
from typing import Optional

from mock_me.core.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

AUDIO_URL_PREFIX = "/uploads/audio"

AUDIO_MEDIA_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
}

DEFAULT_AUDIO_EXTENSION = ".mp3"


def audio_extension(filename: Optional[str]) -> str:
    """Extension to store an upload under; anything not a known audio type becomes ``.mp3``."""
    suffix = Path(filename).suffix.lower() if filename else ""
    return suffix if suffix in AUDIO_MEDIA_TYPES else DEFAULT_AUDIO_EXTENSION


class AudioAssetStore:
    """
    Filesystem store for audio assets.
    """

    def __init__(self, uploads_dir: Optional[str] = None):
        self._uploads_dir = Path(uploads_dir or settings.uploads_dir)
        self._audio_dir = self._uploads_dir / "audio"
        self._initialized = False

    @property
    def uploads_dir(self) -> Path:
        return self._uploads_dir

    @property
    def audio_dir(self) -> Path:
        return self._audio_dir

    async def initialize(self) -> None:
        """Create the audio directory."""
        self._audio_dir.mkdir(parents=True, exist_ok=True)
        self._initialized = True
        logger.info(f"Audio storage initialized at: {self._audio_dir.absolute()}")

    def new_asset_path(self, prefix: str, extension: str) -> Path:
        """Generate a unique path for a new asset, e.g. ``audio_1717171717171_9f2c1a4b.mp3``."""
        if not extension.startswith("."):
            extension = f".{extension}"
        millis = int(time.time() * 1000)
        name = f"{prefix}_{millis}_{uuid.uuid4().hex[:8]}{extension.lower()}"
        self._audio_dir.mkdir(parents=True, exist_ok=True)
        return self._audio_dir / name

    def public_url(self, path: Path) -> str:
        """URL under which the static mount serves ``path``."""
        return f"{AUDIO_URL_PREFIX}/{Path(path).name}"

    async def save_bytes(self, data: bytes, prefix: str, extension: str) -> Path:
        """Write bytes to a fresh asset file and return its path."""
        path = self.new_asset_path(prefix, extension)
        with open(path, "wb") as f:
            f.write(data)
        logger.debug(f"Stored audio asset: {path.name} ({len(data)} bytes)")
        return path

    async def save_upload(
        self,
        content: bytes,
        filename: Optional[str] = None,
        prefix: str = "answer",
    ) -> Path:
        """
        Persist an uploaded recording.

        Only known audio extensions are kept from the client's filename;
        everything else is stored as ``.mp3``.
        """
        path = await self.save_bytes(content, prefix, audio_extension(filename))
        logger.info(f"Stored uploaded answer: {path.name}")
        return path

    async def delete(self, path: Path) -> bool:
        """Delete an asset; returns False when it was already gone."""
        path = Path(path)
        try:
            if path.exists():
                path.unlink()
                logger.info(f"Deleted audio asset: {path.name}")
                return True
            return False
        except OSError as e:
            logger.error(f"Failed to delete audio asset {path.name}: {e}")
            return False

    async def prune_older_than(self, max_age_seconds: float) -> int:
        """Delete assets whose modification time is older than ``max_age_seconds``."""
        if not self._audio_dir.exists():
            return 0

        cutoff = time.time() - max_age_seconds
        removed = 0
        for path in self._audio_dir.iterdir():
            if not path.is_file():
                continue
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    removed += 1
            except OSError as e:
                logger.warning(f"Could not prune audio asset {path.name}: {e}")

        if removed:
            logger.info(f"Pruned {removed} audio asset(s) older than {max_age_seconds:.0f}s")
        return removed

    async def health_check(self) -> bool:
        """Check if the audio directory is accessible."""
        return self._initialized and self._audio_dir.exists()


# Global storage instance
audio_store = AudioAssetStore()
