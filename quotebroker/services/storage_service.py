#quotebroker/services/storage_service.py
from __future__ import annotations

import logging
import re
import time
from pathlib import Path

from fastapi import Depends

from quotebroker.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_PARENS = re.compile(r"[()]")
_UNSAFE = re.compile(r"[^A-Za-z0-9_.\-]")


def sanitize_filename(name: str) -> str:
    cleaned = _WHITESPACE.sub("_", name or "")
    cleaned = _PARENS.sub("_", cleaned)
    return _UNSAFE.sub("", cleaned)


def build_quote_path(project_id, file_name: str, now_ms: int | None = None) -> str:
    """
    <project_id>/<epoch-millis>_<sanitized name>
    """
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{project_id}/{stamp}_{sanitize_filename(file_name)}"


class LocalQuoteStorage:
    """
    Quote files on the local filesystem. Paths are relative to `root` and
    anything resolving outside it is rejected.
    """

    def __init__(self, root: str | Path):
        self.root = Path(root).resolve()

    def _resolve(self, relative_path: str) -> Path:
        target = (self.root / relative_path).resolve()
        if target != self.root and self.root not in target.parents:
            raise ValueError(f"path escapes storage root: {relative_path}")
        return target

    def save(self, relative_path: str, data: bytes) -> str:
        target = self._resolve(relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.info("quote file stored", extra={"path": relative_path, "size": len(data)})
        return relative_path

    def open_path(self, relative_path: str) -> Path:
        target = self._resolve(relative_path)
        if not target.is_file():
            raise FileNotFoundError(relative_path)
        return target

    def delete(self, relative_path: str) -> bool:
        target = self._resolve(relative_path)
        if not target.exists():
            return False
        target.unlink()
        logger.info("quote file removed", extra={"path": relative_path})
        return True


def get_storage(settings: Settings = Depends(get_settings)) -> LocalQuoteStorage:
    return LocalQuoteStorage(settings.storage_dir)
