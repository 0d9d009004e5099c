"""Network address helpers."""
from __future__ import annotations


def host_from_address(address: str) -> str:
    """Return the host portion of a ``host:port`` address.

    IPv6 hosts must be bracketed (``[::1]:8080``). Anything that cannot be
    split into host and port is returned unchanged.
    """

    if address.startswith("["):
        end = address.find("]")
        if end == -1 or not address[end + 1:].startswith(":"):
            return address
        return address[1:end]
    host, sep, _port = address.rpartition(":")
    if not sep or ":" in host:
        return address
    return host
