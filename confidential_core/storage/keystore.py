from typing import Dict, List, Optional
from confidential_core.logger import get_logger, key_tag
from confidential_core.storage.models import KeyEntry
from confidential_core.utils import canonical_address

log = get_logger("Confidential.KeyStore")


class KeyStore:
    """In-memory address -> KeyEntry cache. Addresses are lowercased on every access."""

    def __init__(self):
        self.entries: Dict[str, KeyEntry] = {}

    def register(self, address: str, longterm_key: str) -> None:
        address = canonical_address(address)
        longterm_key = longterm_key.lower()
        rec = self.entries.get(address)
        if rec:
            rec.longterm_key = longterm_key
        else:
            self.entries[address] = KeyEntry(longterm_key=longterm_key)
        log.info(f"[KEYSTORE] registered {key_tag(address)} longterm={key_tag(longterm_key)}")

    def is_registered(self, address: str) -> bool:
        return canonical_address(address) in self.entries

    def lookup(self, address: str) -> Optional[KeyEntry]:
        return self.entries.get(canonical_address(address))

    def record_shortterm(self, address: str, key: str, timestamp: Optional[str]) -> bool:
        """Returns False (and changes nothing) when the address is not registered."""
        rec = self.entries.get(canonical_address(address))
        if rec is None:
            log.debug(f"[KEYSTORE] ignoring shortterm key for unregistered {key_tag(address)}")
            return False
        rec.shortterm_key = key
        rec.timestamp = timestamp
        return True

    def list_entries(self) -> List[dict]:
        return [{"address": addr, **vars(rec)} for addr, rec in self.entries.items()]

    def __contains__(self, address: str) -> bool:
        return self.is_registered(address)

    def __len__(self) -> int:
        return len(self.entries)
