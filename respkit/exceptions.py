"""
Every exception raised by respkit on purpose derives from RespkitException.
Where a builtin exception describes the failure well, we specialize it as well,
so that callers catching ValueError keep working.
"""


class RespkitException(Exception):
    """
    Base class for all exceptions thrown by respkit.
    """

    def __init__(self, message=None):
        super().__init__(message)


class PreconditionUnavailable(RespkitException):
    """
    The status line or the headers were never handed to the response.
    """


class BodyNotComputed(RespkitException):
    """
    A body accessor was called on a response without body chunks.
    """


class DecodeFailure(RespkitException, ValueError):
    """
    The resolved charset is not a known text encoding.
    """


class MalformedURI(RespkitException, ValueError):
    pass
