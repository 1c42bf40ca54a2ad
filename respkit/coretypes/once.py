import threading
from collections.abc import Callable
from typing import Generic
from typing import TypeVar

T = TypeVar("T")


class Once(Generic[T]):
    """
    A cell that is written at most once and can be read from many threads.

    The first caller of `get_or_compute` runs the computation while holding
    the cell's lock. Concurrent callers block until it finishes and then
    observe the same value. If the computation raises, the cell stays empty
    and the exception propagates to that caller only.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: T | None = None
        self._is_set = False

    def __repr__(self) -> str:
        if self._is_set:
            return f"Once({self._value!r})"
        return "Once(<unset>)"

    @property
    def is_set(self) -> bool:
        return self._is_set

    def get(self) -> T:
        """
        Return the stored value.

        *Raises:*
         - `LookupError`, if the cell has not been written yet.
        """
        if not self._is_set:
            raise LookupError("Once cell has not been computed yet.")
        return self._value  # type: ignore

    def get_or_compute(self, compute: Callable[[], T]) -> T:
        if self._is_set:
            return self._value  # type: ignore
        with self._lock:
            if not self._is_set:
                # the flag must only be published after the value
                self._value = compute()
                self._is_set = True
        return self._value  # type: ignore
