from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
import itertools

from confidential_core.constants import JSONRPC_VERSION, PUBLIC_KEY_SIZE
from confidential_core.errors import InvalidEncoding, RemoteFetchError
from confidential_core.utils import from_hex

_ids = itertools.count(1)


@dataclass
class PublicKeyResponse:
    """A contract's short-term key as published by the key provider."""
    key: str
    timestamp: Optional[str] = None
    signature: Any = None

    @classmethod
    def from_result(cls, result: Any) -> "PublicKeyResponse":
        """Validate a provider result; raises RemoteFetchError when unusable."""
        if not isinstance(result, dict) or "key" not in result:
            raise RemoteFetchError(f"malformed public key result: {result!r}", data=result)
        key = result["key"]
        try:
            raw = from_hex(key)
        except InvalidEncoding as e:
            raise RemoteFetchError(f"public key is not hex: {key!r}", data=result) from e
        if len(raw) != PUBLIC_KEY_SIZE:
            raise RemoteFetchError(
                f"public key must be {PUBLIC_KEY_SIZE} bytes, got {len(raw)}", data=result)
        return cls(key=key.lower(), timestamp=result.get("timestamp"), signature=result.get("signature"))


@dataclass
class RPCRequest:
    method: str
    params: List[Any] = field(default_factory=list)
    id: Union[int, str] = field(default_factory=lambda: next(_ids))
    jsonrpc: str = JSONRPC_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }


@dataclass
class RPCResponse:
    id: Union[int, str, None]
    result: Any = None
    error: Optional[Dict[str, Any]] = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RPCResponse":
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=data.get("error"),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )

    def raise_for_error(self) -> None:
        if not self.is_error:
            return
        err = self.error if isinstance(self.error, dict) else {"message": str(self.error)}
        raise RemoteFetchError(
            err.get("message", "Unknown error"),
            code=err.get("code", -32000),
            data=err.get("data"),
        )


class KeyProvider:
    """
    Source of contract short-term keys.

    get_public_key() is a coroutine; failures surface as RemoteFetchError
    and are never retried here.
    """
    name: str = "base"

    async def get_public_key(self, address: str) -> PublicKeyResponse:
        raise NotImplementedError

    def close(self) -> None:
        return
