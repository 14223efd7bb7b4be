"""
confidential_core.fetcher
-------------------------
Resolves a contract's current short-term key: cached value first, the
remote key provider otherwise.

Known limitations, kept deliberately:
- a cached short-term key is trusted until the process exits; its
  timestamp is stored but never checked for expiry
- the provider's signature is not verified against the long-term key
- responses for unregistered addresses are returned but not cached
"""

from __future__ import annotations
import asyncio
from typing import Dict, Optional

from .errors import RemoteFetchError
from .logger import get_logger, key_tag
from .storage import KeyStore
from .transport.transport_base import KeyProvider
from .utils import canonical_address

log = get_logger("Confidential.KeyFetcher")


def _consume_exception(fut: asyncio.Future) -> None:
    # every waiter may have been cancelled; mark the failure as retrieved
    if not fut.cancelled():
        fut.exception()


class KeyFetcher:
    def __init__(self, store: KeyStore, provider: KeyProvider, dedupe_inflight: bool = False):
        """
        Args:
            store: cache shared with the owning KeyManager
            provider: remote source of short-term keys
            dedupe_inflight: share one provider call between concurrent
                get() calls for the same address. Off by default, in which
                case each call fetches and the last cache write wins.
        """
        self.store = store
        self.provider = provider
        self.dedupe_inflight = dedupe_inflight
        self._inflight: Dict[str, asyncio.Future] = {}

    async def get(self, address: str) -> str:
        address = canonical_address(address)

        rec = self.store.lookup(address)
        if rec is not None and rec.shortterm_key is not None:
            log.debug(f"[FETCH] cache hit {key_tag(address)}")
            return rec.shortterm_key

        if not self.dedupe_inflight:
            return await self._fetch(address)

        pending: Optional[asyncio.Future] = self._inflight.get(address)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(address))
            self._inflight[address] = pending
            pending.add_done_callback(lambda _f, a=address: self._inflight.pop(a, None))
            pending.add_done_callback(_consume_exception)
        else:
            log.debug(f"[FETCH] joining in-flight request for {key_tag(address)}")
        # shield: one cancelled waiter must not cancel the shared fetch
        return await asyncio.shield(pending)

    async def _fetch(self, address: str) -> str:
        log.info(f"[FETCH] requesting shortterm key for {key_tag(address)} via {self.provider.name}")
        try:
            response = await self.provider.get_public_key(address)
        except RemoteFetchError as e:
            log.error(f"[FETCH] provider failed for {key_tag(address)}: {e}")
            raise

        log.debug(f"[FETCH] signature for {key_tag(address)} accepted unverified")

        if not self.store.is_registered(address):
            log.info(f"[FETCH] {key_tag(address)} has no longterm key; not caching")
            return response.key

        self.store.record_shortterm(address, response.key, response.timestamp)
        return response.key
