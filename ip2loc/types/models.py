from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    access_key: str = Field(default="")
    is_premium: bool = Field(default=False)

    @property
    def is_free(self) -> bool:
        return not self.is_premium


class _Record(BaseModel):
    """Base for decoded response records.

    Unknown keys are ignored and JSON nulls fall back to the field default, so a
    field missing from the response always reads as its zero value.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Language(_Record):
    code: str = ""
    name: str = ""
    native: str = ""


class Location(_Record):
    geoname_id: int = 0
    capital: str = ""
    languages: List[Language] = Field(default_factory=list)
    country_flag: str = ""
    country_flag_emoji: str = ""
    country_flag_emoji_unicode: str = ""
    calling_code: str = ""
    is_eu: bool = False


class TimeZone(_Record):
    id: str = ""
    current_time: str = ""
    gmt_offset: int = 0
    code: str = ""
    is_daylight_saving: bool = False


class Currency(_Record):
    code: str = ""
    name: str = ""
    plural: str = ""
    symbol: str = ""
    symbol_native: str = ""


class Connection(_Record):
    # ipstack sends the ASN as a number
    model_config = ConfigDict(coerce_numbers_to_str=True)

    asn: str = ""
    isp: str = ""


class Security(_Record):
    is_proxy: bool = False
    proxy_type: str = ""
    is_crawler: bool = False
    crawler_name: str = ""
    crawler_type: str = ""
    is_tor: bool = False
    threat_level: str = ""
    threat_types: List[str] = Field(default_factory=list)


class LookupResult(_Record):
    ip: str = ""
    hostname: str = ""
    type: str = ""
    continent_code: str = ""
    continent_name: str = ""
    country_code: str = ""
    country_name: str = ""
    region_code: str = ""
    region_name: str = ""
    city: str = ""
    zip: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    location: Location = Field(default_factory=Location)
    time_zone: TimeZone = Field(default_factory=TimeZone)
    currency: Currency = Field(default_factory=Currency)
    connection: Connection = Field(default_factory=Connection)
    security: Security = Field(default_factory=Security)


class ServiceErrorDetail(_Record):
    code: int = 0
    type: str = ""
    info: str = ""


class ServiceErrorPayload(_Record):
    """Neutral envelope inspected before a body is trusted as geodata."""

    success: Optional[bool] = None
    error: Optional[ServiceErrorDetail] = None

    @property
    def failed(self) -> bool:
        return self.error is not None and self.error.code > 0


class LookupOutcome(BaseModel):
    ok: bool
    mode: str
    results: List[LookupResult] = Field(default_factory=list)
    error: Optional[str] = None


class LookupRequest(BaseModel):
    """Fully resolved GET request: plan-dependent base URL plus query parameters."""

    model_config = ConfigDict(frozen=True)

    url: str
    params: Dict[str, str]

    @property
    def target(self) -> str:
        return str(httpx.URL(self.url, params=self.params))
