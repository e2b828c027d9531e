"""Local file store for notice media. Streams uploads to disk under collision-free names."""
import asyncio
import errno
import itertools
import logging
import os
import re
import secrets
import time
from pathlib import Path
from typing import Optional, Protocol

import aiofiles
import aiofiles.os

from app.core.config import settings
from app.core.exceptions import ConfigurationError, StorageError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")

_PERMISSION_ERRNOS = {errno.EACCES, errno.EPERM, errno.EROFS}
_CAPACITY_ERRNOS = {errno.ENOSPC, errno.EFBIG} | ({errno.EDQUOT} if hasattr(errno, "EDQUOT") else set())
_MISSING_ERRNOS = {errno.ENOENT, errno.ENOTDIR}


class ByteSource(Protocol):
    async def read(self, size: int = -1) -> bytes: ...


class StoredFile:
    def __init__(self, url: str, stored_name: str, original_name: str, size: int):
        self.url = url
        self.stored_name = stored_name
        self.original_name = original_name
        self.size = size

    def __repr__(self):
        return f"StoredFile(url={self.url!r}, size={self.size})"


def classify_os_error(exc: OSError) -> str:
    if exc.errno in _PERMISSION_ERRNOS:
        return StorageError.PERMISSION
    if exc.errno in _CAPACITY_ERRNOS:
        return StorageError.CAPACITY
    if exc.errno in _MISSING_ERRNOS:
        return StorageError.MISSING_PATH
    return StorageError.IO


def sanitize_base_name(original_name: str) -> str:
    base = Path(original_name.replace("\\", "/")).name
    stem = Path(base).stem if Path(base).suffix else base
    return _UNSAFE_CHARS.sub("_", stem) or "file"


def file_extension(original_name: str) -> str:
    suffix = Path(original_name.replace("\\", "/")).suffix
    return suffix if re.fullmatch(r"\.[A-Za-z0-9]{1,10}", suffix) else ""


class FileStore:
    """Writes uploads into one directory and returns store-relative URLs"""

    def __init__(self, base_dir: str, url_prefix: str = "/uploads"):
        self.base_path = Path(base_dir).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self._ready = False
        self._lock = asyncio.Lock()
        self._counter = itertools.count()

    async def ensure_directory(self) -> None:
        """Create the upload directory if needed and check it is writable. Runs once per process."""
        if self._ready:
            return
        async with self._lock:
            if self._ready:
                return
            logger.info(f"Checking upload directory: {self.base_path}")
            try:
                await aiofiles.os.makedirs(self.base_path, exist_ok=True)
            except OSError as e:
                logger.error(f"Could not create upload directory {self.base_path}: {e}")
                raise ConfigurationError(
                    f"Could not create or access upload directory at {self.base_path}: {e.strerror}"
                ) from e
            if not await aiofiles.os.path.isdir(self.base_path):
                raise ConfigurationError(f"Upload path {self.base_path} is not a directory")
            if not await aiofiles.os.access(self.base_path, os.W_OK | os.X_OK):
                logger.error(f"Write permission denied for upload directory {self.base_path}")
                raise ConfigurationError(
                    f"Write permission denied for upload directory at {self.base_path}"
                )
            self._ready = True

    def unique_name(self, original_name: str) -> str:
        """<sanitized base>-<epoch ms>-<counter>-<random><ext>"""
        suffix = f"{int(time.time() * 1000)}-{next(self._counter)}-{secrets.randbelow(10 ** 9):09d}"
        return f"{sanitize_base_name(original_name)}-{suffix}{file_extension(original_name)}"

    def url_for(self, stored_name: str) -> str:
        return f"{self.url_prefix}/{stored_name}"

    def resolve(self, url: str) -> Path:
        """Filesystem path for a URL returned by store(); rejects anything outside the directory."""
        prefix = self.url_prefix + "/"
        if not url.startswith(prefix):
            raise StorageError(f"Not a stored file URL: {url}", reason=StorageError.MISSING_PATH)
        name = url[len(prefix):]
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise StorageError(f"Not a stored file URL: {url}", reason=StorageError.MISSING_PATH)
        return self.base_path / name

    async def store(self, source: ByteSource, original_name: str, max_bytes: Optional[int] = None) -> StoredFile:
        """Stream `source` into a new file. Raises StorageError; never leaves a partial file behind."""
        await self.ensure_directory()

        stored_name = self.unique_name(original_name)
        file_path = self.base_path / stored_name
        written = 0
        created = False
        logger.info(f"Saving upload '{original_name}' as {stored_name}")

        try:
            async with aiofiles.open(file_path, "xb") as out:
                created = True
                while True:
                    chunk = await source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise StorageError(
                            f"File too large. Max size is {max_bytes / (1024 * 1024):g}MB",
                            reason=StorageError.SIZE_EXCEEDED,
                            stored_name=stored_name,
                        )
                    await out.write(chunk)
            await self._verify(file_path, written)
        except StorageError:
            await self._cleanup(file_path, created)
            raise
        except OSError as e:
            await self._cleanup(file_path, created)
            reason = classify_os_error(e)
            logger.error(f"Error saving upload {stored_name} ({reason}): {e}")
            raise StorageError(
                f"Failed to save uploaded file ({reason}): {e.strerror or e}",
                reason=reason,
                stored_name=stored_name,
            ) from e
        except Exception as e:
            await self._cleanup(file_path, created)
            logger.error(f"Unexpected error saving upload {stored_name}: {e}")
            raise StorageError(f"Failed to save uploaded file: {e}", stored_name=stored_name) from e

        url = self.url_for(stored_name)
        logger.info(f"Stored upload {stored_name} ({written} bytes) at {url}")
        return StoredFile(url=url, stored_name=stored_name, original_name=original_name, size=written)

    async def delete(self, url: str) -> None:
        path = self.resolve(url)
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageError(f"Failed to delete {url}: {e.strerror or e}", reason=classify_os_error(e)) from e

    async def _verify(self, file_path: Path, expected_size: int) -> None:
        if not await aiofiles.os.access(file_path, os.R_OK):
            raise StorageError(
                f"File saved but verification failed: {file_path.name} is not readable",
                reason=StorageError.PERMISSION,
                stored_name=file_path.name,
            )
        actual = (await aiofiles.os.stat(file_path)).st_size
        if actual != expected_size:
            raise StorageError(
                f"File saved but verification failed: wrote {expected_size} bytes, found {actual}",
                stored_name=file_path.name,
            )

    async def _cleanup(self, file_path: Path, created: bool) -> None:
        if not created:
            return
        try:
            await aiofiles.os.remove(file_path)
            logger.info(f"Cleaned up partially written file: {file_path.name}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Error cleaning up file {file_path.name} after save failure: {e}")


def create_file_store() -> FileStore:
    return FileStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)
