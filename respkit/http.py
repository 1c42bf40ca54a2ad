import codecs
import logging
import os
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from dataclasses import dataclass

from respkit.coretypes import multidict
from respkit.coretypes.once import Once
from respkit.exceptions import BodyNotComputed
from respkit.exceptions import DecodeFailure
from respkit.exceptions import MalformedURI
from respkit.exceptions import PreconditionUnavailable
from respkit.net.http import cookies
from respkit.net.http import status_codes
from respkit.net.http import url
from respkit.net.http.headers import parse_charset
from respkit.net.http.stream import ChunkedByteStream
from respkit.utils import strutils

logger = logging.getLogger(__name__)


def _default_charset() -> str:
    charset = os.getenv("RESPKIT_DEFAULT_CHARSET") or "ISO-8859-1"
    try:
        codecs.lookup(charset)
    except LookupError:
        raise ValueError(
            f"Unknown charset in RESPKIT_DEFAULT_CHARSET: {charset!r}"
        ) from None
    return charset


DEFAULT_CHARSET = _default_charset()
"""
Charset used to decode bodies when neither the Content-Type header nor the caller name one.
Defaults to ISO-8859-1, which decodes any byte sequence.
"""

STATUS_UNAVAILABLE = "The response status has not been received."
HEADERS_UNAVAILABLE = "The response headers have not been received."
BODY_NOT_COMPUTED = "The response body has not been received."


# While headers _should_ be ASCII, it's not uncommon for certain headers to be utf-8 encoded.
def _native(x: bytes) -> str:
    return x.decode("utf-8", "surrogateescape")


def _always_bytes(x: str | bytes) -> bytes:
    return strutils.always_bytes(x, "utf-8", "surrogateescape")


class Headers(multidict.MultiDict):  # type: ignore
    """
    Read-only header collection which allows both convenient access to individual
    headers as well as direct access to the underlying raw data.

    Create headers with keyword arguments:
    >>> h = Headers(host="example.com", content_type="application/xml")

    Headers mostly behave like a normal dict:
    >>> h["Host"]
    "example.com"

    Headers are case insensitive:
    >>> h["host"]
    "example.com"

    Headers can also be created from a list of raw (header_name, header_value) byte tuples:
    >>> h = Headers([
        (b"Host",b"example.com"),
        (b"Accept",b"text/html"),
        (b"accept",b"application/xml")
    ])

    Multiple headers are folded into a single header as per RFC 7230:
    >>> h["Accept"]
    "text/html, application/xml"

    Iteration yields every header name once, in the order and casing it was first received.
    For the raw header fields, use `Headers.fields`.

    Caveats:
     - For the "Set-Cookie" header, either use `Response.cookies` or see `Headers.get_all`.
    """

    def __init__(self, fields: Iterable[tuple[bytes, bytes]] = (), **headers):
        """
        *Args:*
         - *fields:* (optional) list of ``(name, value)`` header byte tuples,
           e.g. ``[(b"Host", b"example.com")]``. All names and values must be bytes.
         - *\\*\\*headers:* Additional headers to set. Will replace existing values from `fields`.
           For convenience, underscores in header names will be transformed to dashes.
        """
        super().__init__(fields)

        for key, value in self.fields:
            if not isinstance(key, bytes) or not isinstance(value, bytes):
                raise TypeError("Header fields must be bytes.")

        if headers:
            # content_type -> content-type
            extra = tuple(
                (_always_bytes(name).replace(b"_", b"-"), _always_bytes(value))
                for name, value in headers.items()
            )
            replaced = {name.lower() for name, _ in extra}
            self.fields = (
                tuple(f for f in self.fields if f[0].lower() not in replaced) + extra
            )

    fields: tuple[tuple[bytes, bytes], ...]

    @staticmethod
    def _reduce_values(values) -> str:
        # Headers can be folded
        return ", ".join(values)

    @staticmethod
    def _kconv(key) -> str:
        # Headers are case-insensitive
        return key.lower()

    def __iter__(self) -> Iterator[str]:
        for x in super().__iter__():
            yield _native(x)

    def get_all(self, name: str | bytes) -> list[str]:
        """
        Like `Headers.get`, but does not fold multiple headers into a single one.
        This is useful for Set-Cookie headers, which do not support folding.
        """
        name = _always_bytes(name)
        return [_native(x) for x in super().get_all(name)]

    def get_first(self, name: str | bytes) -> str | None:
        """
        The first value received for the given header, or None.
        """
        values = self.get_all(name)
        return values[0] if values else None

    def items(self, multi=False):
        if multi:
            return ((_native(k), _native(v)) for k, v in self.fields)
        else:
            return super().items()


@dataclass(frozen=True)
class Status:
    """
    The status line of a received response, plus the URL it was received for.
    """

    status_code: int
    reason: str
    url: str

    def __post_init__(self):
        if not isinstance(self.status_code, int) or isinstance(self.status_code, bool):
            raise TypeError(
                f"Status code must be an int, not {type(self.status_code).__name__}."
            )

    @classmethod
    def make(cls, status_code: int = 200, url: str = "http://localhost/") -> "Status":
        """
        Create a status with the standard reason phrase for `status_code`.
        """
        return cls(status_code, status_codes.RESPONSES.get(status_code, ""), url)


class Response:
    """
    A read-only view of a completely received HTTP response.

    The three inputs (status, headers and body chunks) are produced independently
    by the transport and may each be missing. Accessors that need a missing input
    raise instead of returning a default: `PreconditionUnavailable` for status and
    headers, `BodyNotComputed` for the body.

    The decoded body and the parsed cookies are computed on first access and
    cached. A response may be shared between threads once it is constructed.
    """

    def __init__(
        self,
        status: Status | None,
        headers: Headers | Iterable[tuple[bytes, bytes]] | None,
        chunks: Iterable[bytes] | None,
    ):
        if headers is not None and not isinstance(headers, Headers):
            headers = Headers(headers)
        if chunks is not None:
            chunks = tuple(chunks)
            for chunk in chunks:
                if not isinstance(chunk, bytes):
                    raise TypeError(
                        f"Body chunks must be bytes, not {type(chunk).__name__}."
                    )

        self._status = status
        self._headers = headers
        self._chunks: tuple[bytes, ...] | None = chunks
        self._text: Once[str] = Once()
        self._cookies: Once[tuple[cookies.Cookie, ...]] = Once()

    def __repr__(self) -> str:
        if self._status is None:
            status = "no status"
        else:
            status = f"{self._status.status_code} {self._status.reason}".rstrip()
        if self.has_body:
            ct = "unknown content type"
            if self._headers is not None:
                ct = self._headers.get("content-type", ct)
            size = sum(len(c) for c in self._chunks)  # type: ignore
            details = f"{ct}, {size} bytes in {len(self._chunks)} chunk(s)"  # type: ignore
        else:
            details = "no content"
        return f"Response({status}, {details})"

    @classmethod
    def make(
        cls,
        status_code: int = 200,
        chunks: bytes | str | Iterable[bytes | str] = (),
        headers: (
            Headers | Mapping[str, str | bytes] | Iterable[tuple[bytes, bytes]]
        ) = (),
        url: str = "http://localhost/",
    ) -> "Response":
        """
        Simplified API for creating response objects.

        `chunks` may be a single body or an iterable of body chunks.
        Text chunks are encoded as UTF-8.
        """
        if isinstance(headers, Headers):
            pass
        elif isinstance(headers, Mapping):
            headers = Headers(
                (_always_bytes(k), _always_bytes(v)) for k, v in headers.items()
            )
        elif isinstance(headers, Iterable):
            headers = Headers(headers)  # type: ignore
        else:
            raise TypeError(
                f"Expected headers to be an iterable or dict, but is {type(headers).__name__}."
            )

        if isinstance(chunks, (bytes, str)):
            chunks = [chunks]
        return cls(
            Status.make(status_code, url),
            headers,
            [_always_bytes(c) for c in chunks],
        )

    # Status

    def _require_status(self) -> Status:
        if self._status is None:
            raise PreconditionUnavailable(STATUS_UNAVAILABLE)
        return self._status

    @property
    def has_status(self) -> bool:
        return self._status is not None

    @property
    def status_code(self) -> int:
        """
        HTTP Status Code, e.g. ``200``.
        """
        return self._require_status().status_code

    @property
    def reason(self) -> str:
        """
        HTTP reason phrase, for example "Not Found".
        """
        return self._require_status().reason

    @property
    def is_redirected(self) -> bool:
        """
        True for all 3xx responses.
        """
        return 300 <= self.status_code <= 399

    @property
    def url(self) -> str:
        """
        The URL this response was received for.

        *Raises:*
         - `MalformedURI`, if the transport handed us a URL that does not parse.
        """
        self._parse_url()
        return self._require_status().url

    def _parse_url(self) -> tuple[str, str, int, str]:
        u = self._require_status().url
        try:
            return url.parse(u)
        except ValueError as e:
            raise MalformedURI(f"Invalid response URL {u!r}: {e}") from e

    @property
    def scheme(self) -> str:
        return self._parse_url()[0]

    @property
    def host(self) -> str:
        return self._parse_url()[1]

    @property
    def port(self) -> int:
        return self._parse_url()[2]

    @property
    def path(self) -> str:
        """
        Path, query and fragment of the response URL, e.g. "/index.html?q=1".
        """
        return self._parse_url()[3]

    # Headers

    @property
    def has_headers(self) -> bool:
        return self._headers is not None

    @property
    def headers(self) -> Headers:
        """
        The HTTP headers.
        """
        if self._headers is None:
            raise PreconditionUnavailable(HEADERS_UNAVAILABLE)
        return self._headers

    def header(self, name: str) -> str | None:
        """
        The first value of the given header, or None if it is not present.
        """
        return self.headers.get_first(name)

    def header_values(self, name: str) -> list[str]:
        """
        All values of the given header, in the order they were received.
        """
        return self.headers.get_all(name)

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    @property
    def cookies(self) -> tuple[cookies.Cookie, ...]:
        """
        The cookies set by this response, one per Set-Cookie header, in header order.

        See `respkit.net.http.cookies` for the (lenient) parsing rules.
        """
        h = self.headers
        return self._cookies.get_or_compute(
            lambda: cookies.parse_set_cookie_headers(h.get_all("set-cookie"))
        )

    # Body

    @property
    def has_body(self) -> bool:
        return bool(self._chunks)

    @property
    def chunks(self) -> tuple[bytes, ...] | None:
        """
        The raw body chunks in the order they were received.
        """
        return self._chunks

    def _require_chunks(self) -> tuple[bytes, ...]:
        if not self._chunks:
            raise BodyNotComputed(BODY_NOT_COMPUTED)
        return self._chunks

    def _resolve_charset(self, charset: str | None) -> str:
        # A charset announced by the server wins over the one requested by the caller.
        if self._headers is not None:
            announced = parse_charset(self._headers.get_first("content-type"))
            if announced:
                return announced
        return charset or DEFAULT_CHARSET

    def _decode(self, chunks: tuple[bytes, ...], charset: str) -> str:
        try:
            # Chunks are decoded one by one, so a character spanning two chunks is mangled.
            text = "".join(chunk.decode(charset, "replace") for chunk in chunks)
        except LookupError as e:
            raise DecodeFailure(f"Unknown charset for response body: {charset!r}") from e
        logger.debug(
            f"Decoded {len(chunks)} body chunk(s) as {charset}, {len(text)} characters."
        )
        return text

    def get_text(self, charset: str | None = None) -> str:
        """
        The decoded HTTP message body as text.

        The body is decoded once, with the charset from the Content-Type header if it
        names one, with `charset` otherwise, and with `DEFAULT_CHARSET` as a last resort.
        Later calls return the cached text, regardless of the charset they ask for.

        *Raises:*
         - `BodyNotComputed`, if there are no body chunks.
         - `DecodeFailure`, if the charset is unknown. Nothing is cached in this case.

        Bytes that are invalid in the charset, including the halves of a character
        split across two chunks, are replaced with U+FFFD.
        """
        chunks = self._require_chunks()
        enc = self._resolve_charset(charset)
        return self._text.get_or_compute(lambda: self._decode(chunks, enc))

    @property
    def text(self) -> str:
        """
        The decoded HTTP message body as text. See `Response.get_text`.
        """
        return self.get_text()

    def get_excerpt(self, max_length: int, charset: str | None = None) -> str:
        """
        The first `max_length` characters of the decoded body.
        Decodes the body like `Response.get_text` if it has not been decoded before.
        """
        if max_length < 0:
            raise ValueError(f"max_length must not be negative, got {max_length}.")
        return self.get_text(charset)[:max_length]

    def get_stream(self) -> ChunkedByteStream:
        """
        A new byte stream over the body.

        If the body has not been decoded yet, the stream walks the raw chunks without
        decoding or copying them. Otherwise it yields the cached text, encoded with
        `DEFAULT_CHARSET` (unencodable characters become "?").

        *Raises:*
         - `BodyNotComputed`, if there are no body chunks.
        """
        chunks = self._require_chunks()
        if self._text.is_set:
            return ChunkedByteStream(
                [self._text.get().encode(DEFAULT_CHARSET, "replace")]
            )
        return ChunkedByteStream(chunks)
