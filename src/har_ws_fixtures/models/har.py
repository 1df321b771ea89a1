"""Pydantic models for the parts of a HAR capture the fixture builder reads.

Only the fields needed to locate a WebSocket channel and walk its frames are
modelled; everything else in a HAR entry (timings, headers, cookies) is
ignored via ``extra="ignore"``. Chrome/Edge DevTools export the channel frames
under the non-standard ``_webSocketMessages`` key and tag the entry with
``_resourceType == "websocket"``.
"""
from __future__ import annotations

from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Direction(str, Enum):
    """Frame direction label as written by DevTools."""

    OUTBOUND = "send"
    INBOUND = "receive"


class DirectedMessage(BaseModel):
    """One frame of a channel, in capture order.

    ``direction`` stays a plain string when the capture carries a label other
    than ``send``/``receive`` so such frames can be passed through and skipped
    by the pairer instead of failing validation.
    """

    model_config = ConfigDict(frozen=True)

    direction: Union[Direction, str]
    body: str = ""

    @property
    def is_outbound(self) -> bool:
        return self.direction == Direction.OUTBOUND

    @property
    def is_inbound(self) -> bool:
        return self.direction == Direction.INBOUND


class WebSocketFrame(BaseModel):
    """Raw ``_webSocketMessages`` element."""

    model_config = ConfigDict(extra="ignore")

    type: str
    time: Optional[float] = None
    opcode: Optional[int] = None
    data: str = ""

    def to_message(self) -> DirectedMessage:
        try:
            direction: Union[Direction, str] = Direction(self.type)
        except ValueError:
            direction = self.type
        return DirectedMessage(direction=direction, body=self.data)


class HarRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    url: str = ""
    method: Optional[str] = None


class HarEntry(BaseModel):
    """A single ``log.entries`` element (WebSocket relevant subset)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    resource_type: Optional[str] = Field(default=None, alias="_resourceType")
    request: HarRequest = Field(default_factory=HarRequest)
    websocket_messages: Optional[List[WebSocketFrame]] = Field(
        default=None, alias="_webSocketMessages"
    )

    @property
    def is_websocket(self) -> bool:
        return self.resource_type == "websocket"

    def messages(self) -> List[DirectedMessage]:
        """Return the channel frames as directed messages in capture order."""
        return [frame.to_message() for frame in self.websocket_messages or []]


__all__ = [
    "Direction",
    "DirectedMessage",
    "WebSocketFrame",
    "HarRequest",
    "HarEntry",
]
