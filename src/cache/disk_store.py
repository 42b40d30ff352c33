# src/cache/disk_store.py — v1
"""Directory-backed artifact store (CACHE_PATH=<directory>).

One file per fingerprint, named ``<fingerprint><extension>``, stored flat in
the cache directory. There is no manifest: presence of the file is the index.
Side artifacts are never written here.

Blocking filesystem calls run in Starlette's threadpool so the event loop
keeps serving other requests while a write is in progress.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from starlette.concurrency import run_in_threadpool

from transformcache.cache.base_artifact_store import BaseArtifactStore
from transformcache.cache.fingerprint import is_fingerprint
from transformcache.cache.models import Artifact, Fingerprint

logger = logging.getLogger(__name__)


class DiskArtifactStore(BaseArtifactStore):
    """File-based artifact store."""

    serves_files = True

    def __init__(self, cache_root: Path | str, extension: str = ".js") -> None:
        self._root = Path(cache_root).expanduser().resolve()
        self._extension = extension
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, fingerprint: Fingerprint) -> Path:
        """Return the file path backing a fingerprint."""
        return self._root / f"{fingerprint}{self._extension}"

    async def ensure_root(self) -> bool:
        """Re-create the cache directory if something removed it.

        Returns:
            True if the directory had to be re-created.
        """
        return await run_in_threadpool(self._ensure_root_sync)

    async def get(self, fingerprint: Fingerprint) -> Artifact | None:
        """Read an artifact back from disk."""
        path = self.path_for(fingerprint)
        try:
            primary = await run_in_threadpool(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        return Artifact(fingerprint=fingerprint, primary=primary)

    async def put(
        self,
        fingerprint: Fingerprint,
        primary: str,
        side_artifact: str | None = None,
    ) -> None:
        """Write the primary payload. Raises OSError on failure."""
        await run_in_threadpool(self._write_sync, self.path_for(fingerprint), primary)

    async def delete(self, fingerprint: Fingerprint) -> None:
        """Unlink the artifact file, ignoring absence."""
        await run_in_threadpool(self.path_for(fingerprint).unlink, missing_ok=True)

    async def contains(self, fingerprint: Fingerprint) -> bool:
        return await run_in_threadpool(self.path_for(fingerprint).is_file)

    async def list_keys(self) -> list[Fingerprint]:
        return await run_in_threadpool(self._list_keys_sync)

    def _ensure_root_sync(self) -> bool:
        if self._root.is_dir():
            return False
        logger.info("Cache directory missing, re-creating %s", self._root)
        self._root.mkdir(parents=True, exist_ok=True)
        return True

    def _write_sync(self, path: Path, content: str) -> None:
        # A file under a fingerprint name is always complete: write beside it, then rename.
        self._ensure_root_sync()
        tmp = tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=self._root,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        )
        tmp_path = Path(tmp.name)
        try:
            with tmp:
                tmp.write(content)
            os.replace(tmp_path, path)
        finally:
            tmp_path.unlink(missing_ok=True)

    def _list_keys_sync(self) -> list[Fingerprint]:
        if not self._root.is_dir():
            return []
        keys = []
        for path in sorted(self._root.glob(f"*{self._extension}")):
            stem = path.name[: -len(self._extension)]
            if is_fingerprint(stem):
                keys.append(stem)
        return keys
