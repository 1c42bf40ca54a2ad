def parse_charset(content_type: str | None) -> str | None:
    """
    Extract the charset parameter from a content-type value.

    The parameter name is matched case-insensitively and the value is stripped
    of whitespace and of the quotes many servers wrap around it, so both
    `text/html; charset=UTF-8` and `text/html; Charset="utf-8"` work.
    A missing or malformed media type does not matter.

    Returns None if there is no (non-empty) charset parameter.
    """
    if content_type is None:
        return None
    for part in content_type.split(";"):
        name, sep, value = part.partition("=")
        if sep and name.strip().lower() == "charset":
            charset = value.strip().replace('"', "").replace("'", "")
            if charset:
                return charset
    return None
