"""On-disk cache for synthesized narration audio."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Optional

from storytime_providers.exceptions import FilesystemError

logger = logging.getLogger(__name__)

AUDIO_SUFFIX = ".mp3"
WRITE_PROBE_NAME = ".test-write-permission"


class AudioCache:
    """Content-addressed MP3 files keyed by the narrated text and voice.

    A zero-byte file left behind by an interrupted write is treated as a miss
    and removed so the audio is synthesized again.
    """

    def __init__(self, output_dir: str | Path, public_prefix: str = "/audio") -> None:
        self._output_dir = Path(output_dir)
        self._public_prefix = public_prefix.rstrip("/")

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    @staticmethod
    def key(text: str, voice_name: str) -> str:
        return hashlib.md5(f"{text}-{voice_name}".encode("utf-8")).hexdigest()

    def path(self, key: str) -> Path:
        return self._output_dir / f"{key}{AUDIO_SUFFIX}"

    def public_path(self, key: str) -> str:
        return f"{self._public_prefix}/{key}{AUDIO_SUFFIX}"

    def lookup(self, key: str) -> Optional[str]:
        """Return the public path for a cached file, or ``None`` on a miss."""

        target = self.path(key)
        try:
            if not target.is_file():
                return None
            if target.stat().st_size == 0:
                logger.warning("Discarding empty cached audio file %s", target.name)
                target.unlink()
                return None
        except OSError as exc:
            raise FilesystemError(f"Unable to read audio cache entry {target}: {exc}") from exc
        return self.public_path(key)

    def ensure_writable(self) -> None:
        """Create the output directory and verify files can be written to it."""

        probe = self._output_dir / WRITE_PROBE_NAME
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            probe.write_bytes(b"")
            probe.unlink()
        except OSError as exc:
            raise FilesystemError(f"Audio directory {self._output_dir} is not writable: {exc}") from exc

    def store(self, key: str, audio: bytes) -> str:
        """Write ``audio`` under ``key``; call :meth:`ensure_writable` first."""

        target = self.path(key)
        try:
            target.write_bytes(audio)
        except OSError as exc:
            raise FilesystemError(f"Unable to write audio file {target}: {exc}") from exc
        logger.debug("Stored narration audio", extra={"bytes": len(audio)})
        return self.public_path(key)


__all__ = ["AudioCache", "AUDIO_SUFFIX", "WRITE_PROBE_NAME"]
