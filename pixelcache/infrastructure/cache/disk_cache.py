"""
Disk Result Cache

One JSON record per key under a cache directory.

STAGE-C.2: Disk backend

File layout:
    <path>/<sha1(key)>.json -> {"value": {...result...}, "expires_at": 1700000000.0 | null}

Records with expires_at in the past are deleted when read. Unreadable or
corrupt records are reported as a miss. File I/O runs in a worker thread so
the event loop never blocks on the filesystem.
"""

import asyncio
import hashlib
import os
import time
import uuid
from collections.abc import Callable
from pathlib import Path

import orjson

from pixelcache.core.config.constants import DISK_CACHE_DEFAULT_PATH, Stage
from pixelcache.core.logging import get_logger, log_stage
from pixelcache.infrastructure.cache.serializer import result_from_dict, result_to_dict
from pixelcache.models.transform import TransformResult

logger = get_logger(__name__)


class DiskCacheBackend:
    """
    Filesystem cache of transformation results.

    A ttl of None means records never expire. The clock must be wall-clock
    time because expiry survives process restarts.
    """

    def __init__(
        self,
        path: str | os.PathLike = DISK_CACHE_DEFAULT_PATH,
        ttl: int | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._path = Path(path)
        self._ttl = ttl
        self._clock = clock

    @property
    def path(self) -> Path:
        return self._path

    def file_for(self, key: str) -> Path:
        """Record path for a key (hashed so any key is a safe filename)."""
        digest = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return self._path / f"{digest}.json"

    async def get(self, key: str) -> TransformResult | None:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, result: TransformResult) -> None:
        await asyncio.to_thread(self._write, key, result)

    def _read(self, key: str) -> TransformResult | None:
        self._path.mkdir(parents=True, exist_ok=True)
        file = self.file_for(key)

        try:
            record = orjson.loads(file.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, orjson.JSONDecodeError) as e:
            log_stage(
                logger,
                Stage.CACHE_BACKEND,
                "Unreadable disk cache record",
                level="warning",
                file=str(file),
                error=str(e),
            )
            return None

        if not isinstance(record, dict):
            return None

        expires_at = record.get("expires_at")
        if expires_at is not None and self._clock() > expires_at:
            file.unlink(missing_ok=True)
            log_stage(logger, Stage.CACHE_BACKEND, "Disk entry expired", level="debug", key=key)
            return None

        try:
            return result_from_dict(record.get("value") or {})
        except ValueError as e:
            log_stage(
                logger,
                Stage.CACHE_BACKEND,
                "Corrupt disk cache record",
                level="warning",
                file=str(file),
                error=str(e),
            )
            return None

    def _write(self, key: str, result: TransformResult) -> None:
        self._path.mkdir(parents=True, exist_ok=True)
        file = self.file_for(key)

        expires_at = self._clock() + self._ttl if self._ttl else None
        payload = orjson.dumps({"value": result_to_dict(result), "expires_at": expires_at})

        # Write-then-rename so concurrent readers never see a partial record
        tmp = file.with_suffix(f".{uuid.uuid4().hex}.tmp")
        tmp.write_bytes(payload)
        os.replace(tmp, file)
