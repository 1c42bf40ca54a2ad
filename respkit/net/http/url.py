from __future__ import annotations

import ipaddress
import re
import urllib.parse

# Allow underscore in host name
_label_valid = re.compile(r"[A-Z\d\-_]{1,63}$", re.IGNORECASE)


def _is_valid_hostname(hostname: str) -> bool:
    """
    True for DNS names (IDNA names included) and IPv4/IPv6 addresses,
    as urllib hands them out in `SplitResult.hostname`.
    """
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass
    try:
        # round-trip to reject invalid punycode such as "xn--ke"
        ascii_host = hostname.encode("idna").decode("idna").encode("idna")
    except UnicodeError:
        return False
    if len(ascii_host) > 255:
        return False
    labels = ascii_host.decode("ascii").removesuffix(".").split(".")
    return all(_label_valid.match(label) for label in labels)


def parse(url: str | bytes) -> tuple[str, str, int, str]:
    """
    URL-parsing function that checks that
        - the URL has a scheme and a hostname
        - port is an integer 0-65535
        - host is a valid IDNA-encoded hostname or an IP address

    Args:
        A URL (as bytes or as unicode)

    Returns:
        A (scheme, host, port, path) tuple. The path includes query and fragment
        and always starts with a slash. Schemes without a known default port get port 80.

    Raises:
        ValueError, if the URL is not properly formatted.
    """
    if isinstance(url, bytes):
        url = url.decode("ascii")

    parsed = urllib.parse.urlsplit(url)
    if not parsed.scheme:
        raise ValueError("No scheme given")
    if not parsed.hostname:
        raise ValueError("No hostname given")
    if not _is_valid_hostname(parsed.hostname):
        raise ValueError("Invalid Host")

    # .port raises a ValueError on its own for non-numeric or out-of-range ports.
    port = parsed.port
    if port is None:
        port = default_port(parsed.scheme) or 80

    full_path = urllib.parse.urlunsplit(
        ("", "", parsed.path, parsed.query, parsed.fragment)
    )
    if not full_path.startswith("/"):
        full_path = "/" + full_path

    return parsed.scheme, parsed.hostname, port, full_path


def default_port(scheme: str) -> int | None:
    return {
        "http": 80,
        "https": 443,
        "ws": 80,
        "wss": 443,
    }.get(scheme.lower(), None)
