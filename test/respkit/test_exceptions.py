import pytest

from respkit import exceptions


@pytest.mark.parametrize(
    "exc",
    [
        exceptions.PreconditionUnavailable,
        exceptions.BodyNotComputed,
        exceptions.DecodeFailure,
        exceptions.MalformedURI,
    ],
)
def test_hierarchy(exc):
    assert issubclass(exc, exceptions.RespkitException)
    e = exc("message")
    assert str(e) == "message"


def test_value_errors():
    assert issubclass(exceptions.DecodeFailure, ValueError)
    assert issubclass(exceptions.MalformedURI, ValueError)
    assert not issubclass(exceptions.BodyNotComputed, ValueError)
