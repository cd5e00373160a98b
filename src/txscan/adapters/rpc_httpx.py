from __future__ import annotations
import logging
import httpx
from typing import Any, Sequence
from ..domain.errors import ProtocolError, RPCError, TransportError
from ..domain.models import RPCRequest
from ..ports.rpc import RPCClient

log = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

def _body_preview(r: httpx.Response, limit: int = 512) -> str:
    text = r.text
    return text if len(text) <= limit else text[:limit] + "..."

class HttpxRPC(RPCClient):
    def __init__(
        self,
        rpc_url: str,
        timeout_s: float = 20,
        max_conn: int = 16,
        http2: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.client = httpx.AsyncClient(
            http2=http2,
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_conn, max_keepalive_connections=max(1, max_conn//2)),
            transport=transport,
        )

    async def call(self, method: str, params: Sequence[Any] = ()) -> Any:
        payload = RPCRequest(method=method, params=tuple(params)).to_payload()
        try:
            r = await self.client.post(self.rpc_url, json=payload)
        except httpx.DecodingError as e:
            # body arrived but its Content-Encoding could not be undone
            raise ProtocolError(f"{method}: {type(e).__name__}: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"{method}: {type(e).__name__}: {e}") from e

        # strict: "application/json; charset=utf-8" is rejected too
        ctype = r.headers.get("content-type")
        if ctype != JSON_CONTENT_TYPE:
            raise ProtocolError(f"{method}: received non-JSON response ({ctype}, HTTP {r.status_code}): {_body_preview(r)}")

        try:
            data = r.json()
        except ValueError as e:
            raise ProtocolError(f"{method}: failed to decode JSON response: {e}") from e
        if not isinstance(data, dict):
            raise ProtocolError(f"{method}: expected JSON object, got {type(data).__name__}")

        if data.get("error") is not None:
            err = data["error"]
            if isinstance(err, dict):
                raise RPCError(method, err.get("code"), err.get("message"), err.get("data"))
            raise RPCError(method, None, str(err))

        log.debug("%s %s -> HTTP %s", method, payload["params"], r.status_code)
        return data.get("result")

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "HttpxRPC":
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
