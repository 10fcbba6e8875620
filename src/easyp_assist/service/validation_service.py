"""Validation of unsaved config snapshots with content-hash caching."""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass

from easyp_assist.models.errors import ValidateConfigResponse
from easyp_assist.service.validator import EasypCli
from easyp_assist.settings import Settings

logger = logging.getLogger("easyp_assist.validation")


def hash_content(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class _CacheEntry:
    timestamp: float  # monotonic seconds
    content_hash: str
    response: ValidateConfigResponse


class ValidationService:
    """Validates editor snapshots through ``easyp validate-config``.

    Results are cached per ``(target, content hash)`` so unchanged content is
    never re-validated; the least recently used results are evicted once
    ``validate_cache_size`` entries are held.  A per-target debounce entry
    short-circuits repeated requests for the same content inside the debounce
    window.  Thread-safe.
    """

    def __init__(self, settings: Settings, cli: EasypCli | None = None) -> None:
        self._settings = settings
        self._cli = cli or EasypCli(settings)
        self._lock = threading.Lock()
        self._responses: OrderedDict[tuple[str, str], _CacheEntry] = OrderedDict()
        self._debounce: dict[str, _CacheEntry] = {}

    @property
    def debounce_seconds(self) -> float:
        return self._settings.validate_debounce_ms / 1000

    def validate(self, target_path: str, content: str) -> ValidateConfigResponse:
        """Validate *content* as the config at *target_path*."""
        content_hash = hash_content(content)
        key = (target_path, content_hash)
        now = time.monotonic()

        with self._lock:
            cached = self._responses.get(key)
            if cached is not None:
                self._responses.move_to_end(key)
                logger.debug("cache hit target=%s hash=%s", target_path, content_hash[:12])
                return cached.response
            last = self._debounce.get(target_path)
            if (
                last is not None
                and last.content_hash == content_hash
                and now - last.timestamp < self.debounce_seconds
            ):
                logger.debug("debounce hit target=%s hash=%s", target_path, content_hash[:12])
                return last.response

        response = self._validate_snapshot(content)
        if response is None:
            logger.info("no validation result for %s; clearing diagnostics", target_path)
            response = ValidateConfigResponse(valid=True)
        logger.debug(
            "validated target=%s hash=%s valid=%s errors=%d warnings=%d",
            target_path,
            content_hash[:12],
            response.valid,
            len(response.errors),
            len(response.warnings),
        )

        entry = _CacheEntry(timestamp=now, content_hash=content_hash, response=response)
        with self._lock:
            self._responses[key] = entry
            self._responses.move_to_end(key)
            while len(self._responses) > max(1, self._settings.validate_cache_size):
                self._responses.popitem(last=False)
            self._debounce[target_path] = entry
        return response

    def clear(self) -> None:
        """Drop all cached results."""
        with self._lock:
            self._responses.clear()
            self._debounce.clear()

    def _validate_snapshot(self, content: str) -> ValidateConfigResponse | None:
        fd, temp_path = tempfile.mkstemp(prefix="easyp-config-", suffix=".yaml")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            return self._cli.validate_config(temp_path)
        finally:
            try:
                os.unlink(temp_path)
            except OSError:
                logger.debug("could not remove %s", temp_path)
