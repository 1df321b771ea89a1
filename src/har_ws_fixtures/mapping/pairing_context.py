"""Per-pass state for the message pairer.

State Fields:
    strict: Abort on undecodable bodies (True) or skip them (False)
    decoded: Position -> decoded body cache so inbound frames are decoded at
        most once per pass, however many outbound scans reach them
    undecodable: Positions whose body failed to decode (lenient mode only)
    requests / matched / skipped: Counters reported in the pass summary

The context lives for one ``pair_messages`` call and is never shared.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Set

__all__ = ["PairingContext"]


@dataclass
class PairingContext:
    strict: bool = True
    decoded: Dict[int, Any] = field(default_factory=dict)
    undecodable: Set[int] = field(default_factory=set)
    requests: int = 0
    matched: int = 0
    skipped: int = 0

    @property
    def unmatched(self) -> int:
        return self.requests - self.matched
