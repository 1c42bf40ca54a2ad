from respkit import http


def tstatus(**kwargs) -> http.Status:
    """
    Returns:
        respkit.http.Status
    """
    default = dict(
        status_code=200,
        reason="OK",
        url="http://address:22/path",
    )
    default.update(kwargs)
    return http.Status(**default)  # type: ignore


def theaders(*fields: tuple[bytes, bytes]) -> http.Headers:
    """
    Returns:
        respkit.http.Headers
    """
    if not fields:
        fields = ((b"header-response", b"svalue"), (b"content-length", b"7"))
    return http.Headers(fields)


def tresp(**kwargs) -> http.Response:
    """
    Returns:
        respkit.http.Response
    """
    default = dict(
        status=tstatus(),
        headers=theaders(),
        chunks=(b"mess", b"age"),
    )
    default.update(kwargs)
    return http.Response(**default)  # type: ignore
