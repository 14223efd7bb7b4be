import asyncio
import gc
import pytest
from confidential_core.errors import RemoteFetchError
from confidential_core.fetcher import KeyFetcher
from confidential_core.storage import KeyStore
from confidential_core.transport import LocalKeyProvider
from confidential_core.transport.transport_base import KeyProvider, PublicKeyResponse

ADDR = "0x5A0b54D5dc17e0AadC383d2db43B0a0D3E029c4c"
SHORT = "0x59e35409ffdb0be6a74acc88d5e99e2b50782662fa5bf834b8b9d53bc59c7c4a"


class SlowProvider(KeyProvider):
    """Yields to the loop before answering so concurrent gets overlap."""
    name = "slow"

    def __init__(self, keys):
        self.keys = list(keys)
        self.calls = 0

    async def get_public_key(self, address):
        self.calls += 1
        key = self.keys[self.calls - 1]
        await asyncio.sleep(0.01)
        return PublicKeyResponse(key=key, timestamp=hex(self.calls), signature=None)


class FailingProvider(KeyProvider):
    name = "failing"

    def __init__(self):
        self.calls = 0

    async def get_public_key(self, address):
        self.calls += 1
        raise RemoteFetchError("gateway unavailable", code=-32603)


class SlowFailingProvider(FailingProvider):
    async def get_public_key(self, address):
        self.calls += 1
        await asyncio.sleep(0.01)
        raise RemoteFetchError("gateway unavailable")


def test_registered_address_caches_shortterm(caplog):
    store = KeyStore()
    provider = LocalKeyProvider(SHORT, timestamp="0x1")
    fetcher = KeyFetcher(store, provider)
    store.register(ADDR, "0x01")

    assert asyncio.run(fetcher.get(ADDR)) == SHORT
    rec = store.lookup(ADDR)
    assert rec.shortterm_key == SHORT
    assert rec.timestamp == "0x1"
    assert provider.calls == [ADDR.lower()]
    assert "requesting shortterm key" in caplog.text


def test_unregistered_address_not_cached(caplog):
    store = KeyStore()
    provider = LocalKeyProvider(SHORT)
    fetcher = KeyFetcher(store, provider)

    assert asyncio.run(fetcher.get(ADDR)) == SHORT
    assert asyncio.run(fetcher.get(ADDR)) == SHORT
    assert store.lookup(ADDR) is None
    assert len(store) == 0
    assert len(provider.calls) == 2
    assert "not caching" in caplog.text


def test_cached_key_never_refetched_even_when_old():
    store = KeyStore()
    provider = LocalKeyProvider(SHORT)
    fetcher = KeyFetcher(store, provider)
    store.register(ADDR, "0x01")
    store.record_shortterm(ADDR, "0x" + "11" * 32, "0x0")

    for _ in range(3):
        assert asyncio.run(fetcher.get(ADDR.upper().replace("0X", "0x"))) == "0x" + "11" * 32
    assert provider.calls == []


def test_remote_failure_propagates_without_retry():
    store = KeyStore()
    store.register(ADDR, "0x01")
    provider = FailingProvider()
    fetcher = KeyFetcher(store, provider)

    with pytest.raises(RemoteFetchError) as exc:
        asyncio.run(fetcher.get(ADDR))
    assert exc.value.code == -32603
    assert provider.calls == 1
    assert store.lookup(ADDR).shortterm_key is None


def test_concurrent_gets_not_deduplicated_last_write_wins():
    store = KeyStore()
    store.register(ADDR, "0x01")
    first, second = "0x" + "01" * 32, "0x" + "02" * 32
    provider = SlowProvider([first, second])
    fetcher = KeyFetcher(store, provider)

    async def run():
        return await asyncio.gather(fetcher.get(ADDR), fetcher.get(ADDR.lower()))

    assert asyncio.run(run()) == [first, second]
    assert provider.calls == 2
    assert store.lookup(ADDR).shortterm_key == second


def test_concurrent_gets_share_fetch_when_deduplicating():
    store = KeyStore()
    store.register(ADDR, "0x01")
    provider = SlowProvider([SHORT, "0x" + "02" * 32])
    fetcher = KeyFetcher(store, provider, dedupe_inflight=True)

    async def run():
        return await asyncio.gather(*(fetcher.get(ADDR) for _ in range(5)))

    assert asyncio.run(run()) == [SHORT] * 5
    assert provider.calls == 1
    assert fetcher._inflight == {}


def test_dedup_shares_failures():
    provider = FailingProvider()
    fetcher = KeyFetcher(KeyStore(), provider, dedupe_inflight=True)

    async def run():
        return await asyncio.gather(fetcher.get(ADDR), fetcher.get(ADDR), return_exceptions=True)

    results = asyncio.run(run())
    assert all(isinstance(r, RemoteFetchError) for r in results)
    assert provider.calls == 1


def test_dedup_failure_retrieved_when_all_waiters_cancelled():
    provider = SlowFailingProvider()
    fetcher = KeyFetcher(KeyStore(), provider, dedupe_inflight=True)
    unhandled = []

    async def run():
        loop = asyncio.get_running_loop()
        loop.set_exception_handler(lambda _loop, ctx: unhandled.append(ctx))
        waiter = asyncio.ensure_future(fetcher.get(ADDR))
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter
        await asyncio.sleep(0.05)
        del waiter
        gc.collect()

    asyncio.run(run())
    assert provider.calls == 1
    assert fetcher._inflight == {}
    assert unhandled == []
