from __future__ import annotations
from typing import Optional

from .codec import CryptoCodec
from .crypto import IdentityKeypair
from .fetcher import KeyFetcher
from .logger import get_logger
from .storage import KeyEntry, KeyStore
from .transport import provider_factory
from .transport.transport_base import KeyProvider

log = get_logger("Confidential.KeyManager")


class KeyManager:
    """
    Tracks contract keys and seals/opens messages exchanged with contracts.

    Owns one KeyStore, one KeyFetcher over it, and the client identity.
    The identity is created here, once, unless one is passed in; it is
    never rotated or written anywhere.
    """

    def __init__(
        self,
        provider: KeyProvider,
        identity: Optional[IdentityKeypair] = None,
        store: Optional[KeyStore] = None,
        dedupe_inflight: bool = False,
    ):
        self.store = store if store is not None else KeyStore()
        self.identity = identity or IdentityKeypair.generate()
        self.fetcher = KeyFetcher(self.store, provider, dedupe_inflight=dedupe_inflight)
        self.codec = CryptoCodec(self.identity)
        log.info(f"[KEYMANAGER] identity {self.identity.public_key_hex} via {provider.name}")

    @classmethod
    def from_env(cls, config: dict | None = None, **kwargs) -> "KeyManager":
        return cls(provider_factory(config), **kwargs)

    @property
    def public_key(self) -> str:
        return self.identity.public_key_hex

    @property
    def provider(self) -> KeyProvider:
        return self.fetcher.provider

    # ------------------------------------------------------------------
    # Key tracking
    # ------------------------------------------------------------------
    def add(self, address: str, key: str) -> None:
        """Register the long-term key for a contract."""
        self.store.register(address, key)

    register = add

    def is_registered(self, address: str) -> bool:
        return self.store.is_registered(address)

    def lookup(self, address: str) -> Optional[KeyEntry]:
        return self.store.lookup(address)

    async def get(self, address: str) -> str:
        """Short-term key for a contract, from cache or the key provider."""
        return await self.fetcher.get(address)

    # ------------------------------------------------------------------
    # Framing
    # ------------------------------------------------------------------
    async def encrypt(self, message: str, key: str) -> str:
        return await self.codec.encrypt(message, key)

    async def decrypt(self, cyphertext: str) -> str:
        return await self.codec.decrypt(cyphertext)

    def close(self) -> None:
        self.provider.close()
