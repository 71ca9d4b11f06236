import ipaddress
import logging
from functools import lru_cache

from src.core.config import settings

logger = logging.getLogger(__name__)

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


@lru_cache(maxsize=8)
def parse_networks(cidrs: str) -> tuple[IPNetwork, ...]:
    """Parse a comma-separated CIDR list, skipping (and logging) bad entries."""
    networks = []
    for item in cidrs.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            networks.append(ipaddress.ip_network(item, strict=False))
        except ValueError:
            logger.warning("Ignoring invalid trusted proxy network %r", item)
    return tuple(networks)


def is_trusted_proxy(ip: str) -> bool:
    """Whether X-Forwarded-For from this peer may be believed."""
    try:
        addr = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return any(addr in net for net in parse_networks(settings.trusted_proxies))
