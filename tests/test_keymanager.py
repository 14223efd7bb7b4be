import asyncio
from confidential_core import KeyManager, LocalKeyProvider
from confidential_core.crypto import IdentityKeypair
from confidential_core.utils import from_hex

GATEWAY_SECRET = bytes.fromhex("263357bd55c11524811cccf8c9303e3298dd71abeb1b20f3ea7db07655dba9e9")
GATEWAY_PUBLIC = "0x59e35409ffdb0be6a74acc88d5e99e2b50782662fa5bf834b8b9d53bc59c7c4a"
ADDR = "0x5A0b54D5dc17e0AadC383d2db43B0a0D3E029c4c"


def test_register_case_insensitive():
    km = KeyManager(LocalKeyProvider(GATEWAY_PUBLIC))
    km.add(ADDR, "0x" + "33" * 32)
    assert km.is_registered(ADDR.lower())
    assert km.is_registered(ADDR.upper().replace("0X", "0x"))
    assert not km.is_registered("0x" + "00" * 20)


def test_identity_stable_for_manager_lifetime():
    km = KeyManager(LocalKeyProvider(GATEWAY_PUBLIC))
    first = from_hex(asyncio.run(km.encrypt("0x0a", GATEWAY_PUBLIC)))
    second = from_hex(asyncio.run(km.encrypt("0x0b", GATEWAY_PUBLIC)))
    assert first[16:48] == second[16:48] == km.identity.public_key
    assert km.public_key == km.identity.public_key_hex


def test_confidential_call_flow():
    """Resolve a contract key, encrypt to it, and open the contract's reply."""
    client = KeyManager(LocalKeyProvider(GATEWAY_PUBLIC))
    contract = KeyManager(LocalKeyProvider(GATEWAY_PUBLIC),
                          identity=IdentityKeypair.from_secret_key(GATEWAY_SECRET))
    client.register(ADDR, "0x" + "33" * 32)

    async def run():
        key = await client.get(ADDR)
        request = await client.encrypt("0x0a", key)
        assert await contract.decrypt(request) == "0x0a"
        reply = await contract.encrypt("0x" + "00" * 31 + "0a", client.public_key)
        return await client.decrypt(reply)

    assert asyncio.run(run()) == "0x" + "00" * 31 + "0a"
    assert client.lookup(ADDR).shortterm_key == GATEWAY_PUBLIC
    assert client.provider.calls == [ADDR.lower()]


def test_from_env_local(monkeypatch):
    monkeypatch.setenv("CONFIDENTIAL_KEY_PROVIDER", "local")
    km = KeyManager.from_env({"key": GATEWAY_PUBLIC})
    assert isinstance(km.provider, LocalKeyProvider)
    assert asyncio.run(km.get(ADDR)) == GATEWAY_PUBLIC
    km.close()
