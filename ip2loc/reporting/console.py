from __future__ import annotations

import json
from typing import Iterable, List

from ip2loc.types.models import LookupResult


def _fmt_host(res: LookupResult) -> str:
    if res.hostname and res.hostname != res.ip:
        return f"{res.ip} / {res.hostname}"
    return res.ip


def format_result_line(res: LookupResult) -> str:
    """``ip[ / hostname] (country, region, city)`` with empty places left out."""
    places = [p for p in (res.country_name, res.region_name, res.city) if p]
    host = _fmt_host(res)
    if places:
        return f"{host} ({', '.join(places)})"
    return host


def render_results(results: Iterable[LookupResult]) -> str:
    lines: List[str] = [format_result_line(r) for r in results]
    return "".join(line + "\n" for line in lines)


def render_json(results: List[LookupResult], *, bulk: bool) -> str:
    if bulk:
        payload = [r.model_dump(mode="json") for r in results]
    else:
        payload = results[0].model_dump(mode="json") if results else {}
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
