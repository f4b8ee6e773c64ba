from __future__ import annotations

from typing import List, Sequence

from ip2loc.errors import Ip2LocError
from ip2loc.providers.ipstack import IpstackClient
from ip2loc.types.models import Credentials, LookupOutcome, LookupResult
from ip2loc.utils.logging import logger


MODE_REQUESTER = "requester"
MODE_STANDARD = "standard"
MODE_BULK = "bulk"

log = logger("orchestrators")


def select_mode(targets: Sequence[str]) -> str:
    if not targets:
        return MODE_REQUESTER
    if len(targets) == 1:
        return MODE_STANDARD
    return MODE_BULK


async def investigate(targets: Sequence[str], credentials: Credentials) -> LookupOutcome:
    mode = select_mode(targets)
    async with IpstackClient(credentials.access_key, free=credentials.is_free) as api:
        try:
            results: List[LookupResult]
            if mode == MODE_REQUESTER:
                results = [await api.lookup_requester()]
            elif mode == MODE_STANDARD:
                results = [await api.lookup_standard(targets[0])]
            else:
                results = await api.lookup_bulk(list(targets))
        except Ip2LocError as e:
            log["debug"]("lookup failed", mode=mode, kind=type(e).__name__, error=str(e))
            return LookupOutcome(ok=False, mode=mode, error=str(e))

    return LookupOutcome(ok=True, mode=mode, results=results)
