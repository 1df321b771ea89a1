"""Capture reading layer: locate a WebSocket channel inside a HAR file.

This module is the input side of the pipeline. `CaptureSource` opens a HAR
capture, walks its ``log.entries`` list and returns the frames of the first
WebSocket entry matching the configured request URL (or the first WebSocket
entry at all when no URL is configured).

Entries are validated lazily, one at a time, so a malformed entry after the
selected channel never fails the run.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

from pydantic import ValidationError

from .config import ExtractionConfig
from .models.har import DirectedMessage, HarEntry

logger = logging.getLogger(__name__)


class CaptureFormatError(ValueError):
    """The capture file cannot be read as a HAR document."""


class ChannelNotFoundError(LookupError):
    """No WebSocket entry in the capture matches the requested URL."""


class CaptureSource:
    """HAR capture file exposing its WebSocket channels.

    Args:
        path: Path to the ``.har`` file.
        filter_url: Exact request URL of the channel to extract. ``None`` or
            blank selects the first WebSocket entry.
    """

    def __init__(self, path: str, filter_url: Optional[str] = None):
        self._path = path
        self._filter_url = (filter_url or "").strip() or None
        logger.debug("Capture init: path=%s filter_url=%s", self._path, self._filter_url)

    @property
    def path(self) -> str:
        return self._path

    @property
    def filter_url(self) -> Optional[str]:
        return self._filter_url

    def _load(self) -> Dict[str, Any]:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except OSError as e:
            raise CaptureFormatError(f"cannot read capture {self._path}: {e}") from e
        except ValueError as e:
            raise CaptureFormatError(f"capture {self._path} is not valid JSON: {e}") from e
        if not isinstance(document, dict):
            raise CaptureFormatError(f"capture {self._path} is not a JSON object")
        return document

    def _raw_entries(self) -> List[Any]:
        document = self._load()
        log = document.get("log", document)
        entries = log.get("entries") if isinstance(log, dict) else None
        if not isinstance(entries, list):
            raise CaptureFormatError(f"capture {self._path} has no log.entries list")
        return entries

    def entries(self) -> Iterator[HarEntry]:
        """Yield validated entries in capture order."""
        for position, raw in enumerate(self._raw_entries()):
            try:
                yield HarEntry.model_validate(raw)
            except ValidationError as e:
                raise CaptureFormatError(
                    f"capture {self._path}: entry {position} is malformed: {e}"
                ) from e

    def _matches(self, entry: HarEntry) -> bool:
        if not entry.is_websocket:
            return False
        return self._filter_url is None or entry.request.url == self._filter_url

    def select_channel(self) -> HarEntry:
        """Return the first WebSocket entry matching the URL filter.

        Raises:
            CaptureFormatError: the file is not a readable HAR document.
            ChannelNotFoundError: no matching WebSocket entry exists.
        """
        for entry in self.entries():
            if self._matches(entry):
                logger.info(
                    "Selected WebSocket channel %s (%d frame(s))",
                    entry.request.url,
                    len(entry.websocket_messages or []),
                )
                return entry
        if self._filter_url:
            raise ChannelNotFoundError(
                f"no WebSocket entry for {self._filter_url} in {self._path}"
            )
        raise ChannelNotFoundError(f"no WebSocket entry in {self._path}")

    def messages(self) -> List[DirectedMessage]:
        """Return the selected channel's frames in capture order."""
        entry = self.select_channel()
        messages = entry.messages()
        if not messages:
            logger.warning("WebSocket channel %s has no captured frames", entry.request.url)
        return messages


def load_channel_messages(config: ExtractionConfig) -> List[DirectedMessage]:
    """Read the capture described by ``config`` and return its channel frames."""
    return CaptureSource(config.source_path, config.filter_url).messages()


__all__ = [
    "CaptureFormatError",
    "ChannelNotFoundError",
    "CaptureSource",
    "load_channel_messages",
]
