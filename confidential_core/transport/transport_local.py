# confidential_core/transport/transport_local.py
from typing import Any, Optional
from confidential_core.logger import get_logger, key_tag
from confidential_core.transport.transport_base import KeyProvider, PublicKeyResponse
from confidential_core.utils import now_hex_ms

log = get_logger("Confidential.Transport.Local")


class LocalKeyProvider(KeyProvider):
    """
    In-process provider that hands out one fixed key, stamped with the
    current time. Stands in for a gateway in tests and offline tooling.
    """
    name = "local"

    def __init__(self, key: str, signature: Any = 0, timestamp: Optional[str] = None):
        self.key = key
        self.signature = signature
        self.timestamp = timestamp
        self.calls = []

    async def get_public_key(self, address: str) -> PublicKeyResponse:
        self.calls.append(address)
        log.info(f"[LOCAL KEY] {key_tag(address)} → {key_tag(self.key)}")
        return PublicKeyResponse.from_result({
            "key": self.key,
            "timestamp": self.timestamp or now_hex_ms(),
            "signature": self.signature,
        })
