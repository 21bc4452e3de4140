"""Address selection for freshly allocated Linodes."""

from __future__ import annotations

import ipaddress
from typing import Iterable, Optional

PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
)


class NoPublicAddressError(RuntimeError):
    """Raised when an instance has no routable IPv4 address."""


def is_private_ip(address: str) -> bool:
    """Return True when ``address`` falls in an RFC1918 block."""
    ip = ipaddress.ip_address(address)
    if ip.version != 4:
        return False
    return any(ip in network for network in PRIVATE_NETWORKS)


def first_public_ip(addresses: Iterable[str]) -> Optional[str]:
    for address in addresses:
        if not is_private_ip(address):
            return address
    return None


def select_public_ip(addresses: Iterable[str]) -> str:
    candidates = list(addresses)
    address = first_public_ip(candidates)
    if address is None:
        raise NoPublicAddressError(
            f"Linode IP address is not found (candidates: {', '.join(candidates) or 'none'})"
        )
    return address
