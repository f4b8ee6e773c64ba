"""Shared fixtures: sample ipstack payloads and a recording mock transport."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List

import httpx
import pytest

from ip2loc.utils.http import create_client


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "IP2LOC_CONFIG",
        "IPSTACK_ACCESS_KEY",
        "IPSTACK_PREMIUM",
        "IP2LOC_LOG_LEVEL",
        "IP2LOC_USER_AGENT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def full_payload() -> Dict[str, Any]:
    """A premium standard lookup response with every nested record present."""
    return {
        "ip": "134.201.250.155",
        "hostname": "134.201.250.155",
        "type": "ipv4",
        "continent_code": "NA",
        "continent_name": "North America",
        "country_code": "US",
        "country_name": "United States",
        "region_code": "CA",
        "region_name": "California",
        "city": "Los Angeles",
        "zip": "90013",
        "latitude": 34.0453,
        "longitude": -118.2413,
        "location": {
            "geoname_id": 5368361,
            "capital": "Washington D.C.",
            "languages": [
                {"code": "en", "name": "English", "native": "English"},
                {"code": "es", "name": "Spanish", "native": "Español"},
            ],
            "country_flag": "https://assets.ipstack.com/images/assets/flags_svg/us.svg",
            "country_flag_emoji": "🇺🇸",
            "country_flag_emoji_unicode": "U+1F1FA U+1F1F8",
            "calling_code": "1",
            "is_eu": False,
        },
        "time_zone": {
            "id": "America/Los_Angeles",
            "current_time": "2018-03-29T07:35:08-07:00",
            "gmt_offset": -25200,
            "code": "PDT",
            "is_daylight_saving": True,
        },
        "currency": {
            "code": "USD",
            "name": "US Dollar",
            "plural": "US dollars",
            "symbol": "$",
            "symbol_native": "$",
        },
        "connection": {"asn": 25876, "isp": "Los Angeles Department of Water & Power"},
        "security": {
            "is_proxy": False,
            "proxy_type": None,
            "is_crawler": False,
            "crawler_name": None,
            "crawler_type": None,
            "is_tor": False,
            "threat_level": "low",
            "threat_types": ["attack_source", "spam"],
        },
    }


@pytest.fixture
def error_payload() -> Dict[str, Any]:
    return {
        "success": False,
        "error": {
            "code": 104,
            "type": "monthly_limit_reached",
            "info": "Your monthly API request volume has been reached. Please upgrade your plan.",
        },
    }


class Recorder:
    """Mock transport handler that records requests and replays one response."""

    def __init__(self, status_code: int = 200, body: Any = None, raw: bytes | None = None) -> None:
        self.status_code = status_code
        self.body = body
        self.raw = raw
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, content=json.dumps(self.body).encode("utf-8"))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def recorder_client() -> Callable[[Recorder], httpx.AsyncClient]:
    def _make(handler: Recorder) -> httpx.AsyncClient:
        return create_client(transport=httpx.MockTransport(handler))

    return _make
