"""
A simple, lenient Set-Cookie parser.

Each Set-Cookie value yields exactly one `Cookie`. Fields are separated by a
semicolon and optional whitespace. The first field is the cookie itself, all
later fields are attributes, of which only `Expires`, `Domain`, `Path` and
`Secure` are recognized (case-insensitively). Nothing is validated, unknown
attributes are dropped and no unquoting or unescaping takes place.

Values are split on `=` without a limit, and only the element right after the
name is kept: `token=abc==` yields the value `abc`. Use the raw `Set-Cookie`
header if you need the full value.
"""

import email.utils
import logging
import re
import time
from collections.abc import Iterable
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SESSION = -1
"""`Cookie.max_age` for cookies without a usable expiry, which live until the session ends."""

_FIELD_SEP = re.compile(r";\s*")


@dataclass(frozen=True)
class Cookie:
    domain: str | None
    name: str
    value: str
    path: str | None
    max_age: int = SESSION
    secure: bool = False

    @property
    def is_session(self) -> bool:
        return self.max_age == SESSION


def _split_pair(field: str) -> tuple[str, str]:
    # split without a limit, then keep the first two elements
    parts = field.split("=")
    if len(parts) < 2:
        return parts[0], ""
    return parts[0], parts[1]


def _parse_expires(expires: str, now: float | None = None) -> int:
    """
    Convert an expires attribute to a max-age in seconds.

    Integer literals are taken as they are. HTTP dates are converted to the number
    of seconds from `now` until that date, clamped at zero. Anything else results in
    a session cookie.
    """
    try:
        return int(expires)
    except ValueError:
        pass
    e = email.utils.parsedate_tz(expires)
    if e:
        if now is None:
            now = time.time()
        return max(0, int(email.utils.mktime_tz(e) - now))
    logger.warning(f"Ignoring unparseable cookie expiry: {expires!r}")
    return SESSION


def parse_set_cookie_header(line: str, now: float | None = None) -> Cookie:
    """
    Parse a single Set-Cookie header value.

    *Args:*
     - *line:* the header value, e.g. `sid=abc; Path=/; Secure`.
     - *now:* (optional) the reference timestamp for converting an `Expires` date.
    """
    fields = _FIELD_SEP.split(line)
    name, value = _split_pair(fields[0])

    expires = str(SESSION)
    domain = None
    path = None
    secure = False
    for field in fields[1:]:
        if field.lower() == "secure":
            secure = True
        elif field.find("=") > 0:
            attr, attr_value = _split_pair(field)
            attr = attr.lower()
            if attr == "expires":
                expires = attr_value
            elif attr == "domain":
                domain = attr_value or None
            elif attr == "path":
                path = attr_value or None

    return Cookie(
        domain=domain,
        name=name,
        value=value,
        path=path,
        max_age=_parse_expires(expires, now),
        secure=secure,
    )


def parse_set_cookie_headers(
    headers: Iterable[str], now: float | None = None
) -> tuple[Cookie, ...]:
    """
    Parse all given Set-Cookie header values, preserving their order.
    """
    rv = tuple(parse_set_cookie_header(header, now) for header in headers)
    logger.debug(f"Parsed {len(rv)} cookie(s).")
    return rv
