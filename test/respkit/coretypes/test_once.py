import threading
from unittest import mock

import pytest

from respkit.coretypes.once import Once


def test_unset():
    o = Once()
    assert not o.is_set
    assert repr(o) == "Once(<unset>)"
    with pytest.raises(LookupError):
        o.get()


def test_compute_once():
    o = Once()
    compute = mock.Mock(return_value="foo")
    assert o.get_or_compute(compute) == "foo"
    assert o.get_or_compute(lambda: "bar") == "foo"
    assert compute.call_count == 1
    assert o.is_set
    assert o.get() == "foo"
    assert repr(o) == "Once('foo')"


def test_none_is_a_value():
    o = Once()
    assert o.get_or_compute(lambda: None) is None
    assert o.is_set
    assert o.get_or_compute(lambda: "bar") is None


def test_exception_leaves_cell_unset():
    o = Once()

    def fail():
        raise ValueError("nope")

    with pytest.raises(ValueError):
        o.get_or_compute(fail)
    assert not o.is_set
    assert o.get_or_compute(lambda: 42) == 42


def test_concurrent():
    o = Once()
    n = 16
    barrier = threading.Barrier(n)
    calls = []
    results = []

    def compute():
        calls.append(1)
        return object()

    def worker():
        barrier.wait()
        results.append(o.get_or_compute(compute))

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert len(calls) == 1
    assert len(results) == n
    assert all(r is results[0] for r in results)
