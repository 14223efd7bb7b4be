# confidential_core/transport/transport_http.py
import asyncio
import threading
import requests
from confidential_core.constants import DEFAULT_RPC_TIMEOUT, METHOD_GET_PUBLIC_KEY
from confidential_core.errors import RemoteFetchError
from confidential_core.logger import get_logger, key_tag
from confidential_core.transport.transport_base import (
    KeyProvider, PublicKeyResponse, RPCRequest, RPCResponse,
)

log = get_logger("Confidential.Transport.HTTP")


class HTTPKeyProvider(KeyProvider):
    """
    Fetches short-term keys from a web3 gateway over JSON-RPC.

    The blocking requests call runs in a worker thread so awaiting
    get_public_key() never stalls the event loop.
    """
    name = "http"

    def __init__(self, url: str, timeout: float = DEFAULT_RPC_TIMEOUT, session=None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        # Session is not thread-safe; to_thread workers post one at a time
        self._lock = threading.Lock()

    def call(self, method: str, params: list):
        """Blocking JSON-RPC call; returns the ``result`` member."""
        req = RPCRequest(method=method, params=params)
        log.debug(f"[HTTP RPC] → {self.url} | method={method} id={req.id}")
        try:
            with self._lock:
                res = self.session.post(
                    self.url,
                    json=req.to_dict(),
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
        except requests.RequestException as e:
            log.error(f"[HTTP RPC] {method} failed: {e}")
            raise RemoteFetchError(f"{method} request failed: {e}") from e

        if not res.ok:
            log.error(f"[HTTP RPC] {res.status_code}: {res.text}")
            raise RemoteFetchError(f"{method} returned HTTP {res.status_code}",
                                   code=res.status_code, data=res.text)
        try:
            body = res.json()
        except ValueError as e:
            raise RemoteFetchError(f"{method} returned invalid JSON", data=res.text) from e
        if not isinstance(body, dict):
            raise RemoteFetchError(f"{method} returned a non-object response", data=body)

        rpc = RPCResponse.from_dict(body)
        rpc.raise_for_error()
        return rpc.result

    async def get_public_key(self, address: str) -> PublicKeyResponse:
        result = await asyncio.to_thread(self.call, METHOD_GET_PUBLIC_KEY, [address])
        response = PublicKeyResponse.from_result(result)
        log.info(f"[HTTP RPC] key for {key_tag(address)} → {key_tag(response.key)}")
        return response

    def close(self) -> None:
        self.session.close()
