"""Client for the ipstack geolocation API.

https://ipstack.com/documentation
"""
from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence

import httpx
from pydantic import ValidationError

from ip2loc.errors import (
    DecodeError,
    HTTPStatusError,
    InvalidTargetError,
    PlanError,
    ServiceError,
    TransportError,
)
from ip2loc.types.models import LookupRequest, LookupResult, ServiceErrorPayload
from ip2loc.utils.http import create_client
from ip2loc.utils.logging import logger


IPSTACK_HOST = "api.ipstack.com"
IPSTACK_BASE = f"https://{IPSTACK_HOST}"
# free plan doesn't support https
IPSTACK_BASE_FREE = f"http://{IPSTACK_HOST}"

REQUESTER_PATH = "check"

log = logger("providers.ipstack")


class IpstackClient:
    """One ipstack account (access key + plan) bound to an httpx client.

    Each lookup issues exactly one GET request. Failures are raised as
    ``ip2loc.errors`` exceptions; nothing is retried.

    Usage:
        async with IpstackClient(key, free=True) as api:
            res = await api.lookup_standard("134.201.250.155")
    """

    def __init__(self, access_key: str, *, free: bool, client: Optional[httpx.AsyncClient] = None) -> None:
        self.access_key = access_key
        self.free = free
        self._owns_client = client is None
        self._client = client if client is not None else create_client()

    async def __aenter__(self) -> "IpstackClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    def resolve_request(self, path: str) -> LookupRequest:
        base = IPSTACK_BASE_FREE if self.free else IPSTACK_BASE
        params = {
            "access_key": self.access_key,
            "hostname": "1",
            "output": "json",
        }
        if not self.free:
            params["security"] = "1"
        return LookupRequest(url=f"{base}/{path}", params=params)

    async def lookup_requester(self) -> LookupResult:
        """Look up the public IP this request originates from."""
        body = await self._execute(self.resolve_request(REQUESTER_PATH))
        return _decode_single(body)

    async def lookup_standard(self, address: str) -> LookupResult:
        body = await self._execute(self.resolve_request(address))
        return _decode_single(body)

    async def lookup_bulk(self, addresses: Sequence[str]) -> List[LookupResult]:
        """Look up several addresses in one request (premium plan only)."""
        if self.free:
            raise PlanError()
        body = await self._execute(self.resolve_request(",".join(addresses)))
        return _decode_bulk(body)

    async def _execute(self, request: LookupRequest) -> bytes:
        log["debug"]("ipstack request", url=request.url, free=self.free)
        try:
            async with self._client.stream("GET", request.url, params=request.params) as r:
                body = await r.aread()
        except (httpx.InvalidURL, UnicodeError) as e:
            # targets are passed through unvalidated; httpx rejects some while building the URL
            log["debug"]("ipstack request rejected", error=str(e))
            raise InvalidTargetError(f"invalid lookup target: {e}") from e
        except httpx.HTTPError as e:
            log["debug"]("ipstack request failed", url=request.url, error=str(e))
            raise TransportError(f"request to {request.url} failed: {e}") from e

        log["debug"]("ipstack response", url=request.url, status=r.status_code, size=len(body))
        if r.status_code == 200:
            return body
        # an error payload with a proper code says more than the bare status
        _raise_for_service_error(_try_json(body))
        raise HTTPStatusError(r.status_code, request.url)


def _try_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError:
        return None


def _load_json(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError as e:
        raise DecodeError(f"malformed JSON response: {e}") from e


def _raise_for_service_error(obj: Any) -> None:
    if not isinstance(obj, dict):
        return
    try:
        payload = ServiceErrorPayload.model_validate(obj)
    except ValidationError:
        return
    if payload.failed and payload.error is not None:
        raise ServiceError(payload.error.code, payload.error.type, payload.error.info)


def _decode_result(obj: Any) -> LookupResult:
    if not isinstance(obj, dict):
        raise DecodeError(f"expected a JSON object, got {type(obj).__name__}")
    _raise_for_service_error(obj)
    try:
        return LookupResult.model_validate(obj)
    except ValidationError as e:
        raise DecodeError(f"unexpected lookup result: {e}") from e


def _decode_single(body: bytes) -> LookupResult:
    return _decode_result(_load_json(body))


def _decode_bulk(body: bytes) -> List[LookupResult]:
    obj = _load_json(body)
    if isinstance(obj, list):
        return [_decode_result(item) for item in obj]
    # not an array: the service answered the whole batch with one error object
    _raise_for_service_error(obj)
    raise DecodeError(f"expected a JSON array for bulk lookup, got {type(obj).__name__}")
