# confidential_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class KeyEntry:
    """
    Cached keys for one contract address.

    longterm_key is registered by the caller out-of-band. shortterm_key and
    timestamp are filled in only after a successful remote fetch; the
    timestamp is kept exactly as the provider returned it (hex millis).
    """
    longterm_key: str
    shortterm_key: Optional[str] = None
    timestamp: Optional[str] = None

    @property
    def has_shortterm(self) -> bool:
        return self.shortterm_key is not None

    @property
    def timestamp_ms(self) -> Optional[int]:
        if self.timestamp is None:
            return None
        return int(self.timestamp, 16)
