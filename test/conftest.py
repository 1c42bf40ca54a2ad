import pytest

from respkit import http


@pytest.fixture
def default_charset(monkeypatch):
    """
    Allows tests to change the process-wide default charset.
    """

    def set_charset(charset: str) -> None:
        monkeypatch.setattr(http, "DEFAULT_CHARSET", charset)

    return set_charset
