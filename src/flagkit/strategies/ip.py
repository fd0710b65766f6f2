"""IP address strategy."""

import ipaddress
from typing import Any

from .interfaces import FlagStrategy, Strategy


class IpStrategy(Strategy):
    """
    Enable for IP addresses and CIDR ranges.

    Usage:
        {
            "strategy": "ip",
            "whitelist_ips": ["203.0.113.7"],
            "ip_ranges": ["10.0.0.0/8", "2001:db8::/32"],
        }

    Matches if context["ip_address"] equals a whitelisted IP or falls inside
    any range. Ranges without a prefix are exact matches. IPv4 addresses
    never match IPv6 ranges and vice versa.
    """

    name = FlagStrategy.IP.value

    def is_enabled(
        self,
        config: dict[str, Any],
        context: dict[str, Any] | None = None,
    ) -> bool:
        context = context or {}
        ip_address = context.get("ip_address")
        if not isinstance(ip_address, str):
            return False

        whitelist_ips = config.get("whitelist_ips") or []
        ip_ranges = config.get("ip_ranges") or []
        if not whitelist_ips and not ip_ranges:
            return False

        if isinstance(whitelist_ips, (list, tuple)) and ip_address in whitelist_ips:
            return True

        if isinstance(ip_ranges, (list, tuple)):
            return any(ip_in_range(ip_address, ip_range) for ip_range in ip_ranges)

        return False


def ip_in_range(ip: str, ip_range: Any) -> bool:
    """
    Check if an IP falls inside a CIDR range.

    Returns False for malformed input, mismatched IP versions or a prefix
    length outside the address family's range.
    """
    if not isinstance(ip_range, str):
        return False

    if "/" not in ip_range:
        return ip == ip_range

    subnet, bits = ip_range.split("/", 1)
    if not (bits.isascii() and bits.isdigit()):
        return False

    try:
        address = ipaddress.ip_address(ip)
        subnet_address = ipaddress.ip_address(subnet)
    except ValueError:
        return False

    if address.version != subnet_address.version:
        return False

    prefix = int(bits)
    if prefix > subnet_address.max_prefixlen:
        return False

    try:
        network = ipaddress.ip_network((subnet_address, prefix), strict=False)
    except ValueError:
        return False
    return address in network
