from __future__ import annotations

import ipaddress

from fastapi import Request

from hotspot_gate.schemas.responses import IPCheckResponse

UNKNOWN_IP = "unknown"


def get_client_ip(request: Request, trust_forwarded: bool = True) -> str:
    """First X-Forwarded-For entry, else the socket peer address."""
    if trust_forwarded:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_IP


def ip_to_int(ip: str) -> int | None:
    """Dotted quad to a 32-bit integer; None when it is not an IPv4 address."""
    try:
        return int(ipaddress.IPv4Address(ip.strip()))
    except ValueError:
        return None


def ip_in_range(ip: str, start: str, end: str) -> bool:
    value, low, high = ip_to_int(ip), ip_to_int(start), ip_to_int(end)
    if value is None or low is None or high is None:
        return False
    return low <= value <= high


def check_ip(ip: str, start: str, end: str) -> IPCheckResponse:
    return IPCheckResponse(allowed=ip_in_range(ip, start, end), ip=ip)


def is_network_allowed(
    ip: str,
    allowed_ips: list[str],
    enforce_range: bool = False,
    range_start: str = "",
    range_end: str = "",
) -> bool:
    """Issuer network gate.

    With no allowlist and no range enforcement everyone passes. Otherwise the
    IP must appear in the allowlist or fall inside the hotspot range.
    """
    if not allowed_ips and not enforce_range:
        return True
    if ip in allowed_ips:
        return True
    return enforce_range and ip_in_range(ip, range_start, range_end)
