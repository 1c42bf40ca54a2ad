import pytest

from respkit.coretypes import multidict


class _TMulti:
    @staticmethod
    def _kconv(key):
        return key.lower()


class TMultiDict(_TMulti, multidict.MultiDict):
    pass


class TestMultiDict:
    @staticmethod
    def _multi():
        return TMultiDict((("foo", "bar"), ("bar", "baz"), ("Bar", "bam")))

    def test_init(self):
        md = TMultiDict()
        assert len(md) == 0

        md = TMultiDict([("foo", "bar")])
        assert len(md) == 1
        assert md.fields == (("foo", "bar"),)

    def test_repr(self):
        assert repr(self._multi()) == (
            "TMultiDict[('foo', 'bar'), ('bar', 'baz'), ('Bar', 'bam')]"
        )

    def test_getitem(self):
        md = TMultiDict([("foo", "bar")])
        assert "foo" in md
        assert "Foo" in md
        assert md["foo"] == "bar"

        with pytest.raises(KeyError):
            assert md["bar"]

        md_multi = TMultiDict([("foo", "a"), ("foo", "b")])
        assert md_multi["foo"] == "a"

    def test_immutable(self):
        md = self._multi()
        with pytest.raises(TypeError):
            md["foo"] = "baz"
        with pytest.raises(TypeError):
            del md["foo"]
        assert md.fields == (("foo", "bar"), ("bar", "baz"), ("Bar", "bam"))

    def test_iter(self):
        md = self._multi()
        assert list(md.__iter__()) == ["foo", "bar"]

    def test_len(self):
        md = TMultiDict()
        assert len(md) == 0

        md = self._multi()
        assert len(md) == 2

    def test_eq(self):
        assert TMultiDict() == TMultiDict()
        assert not (TMultiDict() == 42)

        md1 = self._multi()
        md2 = self._multi()
        assert md1 == md2
        md3 = TMultiDict(md1.fields[1:] + md1.fields[:1])
        assert not (md1 == md3)

    def test_hash(self):
        assert hash(self._multi()) == hash(self._multi())
        assert len({self._multi(), self._multi()}) == 1

    def test_get_all(self):
        md = self._multi()
        assert md.get_all("foo") == ["bar"]
        assert md.get_all("bar") == ["baz", "bam"]
        assert md.get_all("baz") == []

    def test_get(self):
        md = self._multi()
        assert md.get("BAR") == "baz"
        assert md.get("baz") is None
        assert md.get("baz", 42) == 42

    def test_keys(self):
        md = self._multi()
        assert list(md.keys()) == ["foo", "bar"]
        assert list(md.keys(multi=True)) == ["foo", "bar", "Bar"]

    def test_values(self):
        md = self._multi()
        assert list(md.values()) == ["bar", "baz"]
        assert list(md.values(multi=True)) == ["bar", "baz", "bam"]

    def test_items(self):
        md = self._multi()
        assert list(md.items()) == [("foo", "bar"), ("bar", "baz")]
        assert list(md.items(multi=True)) == [
            ("foo", "bar"),
            ("bar", "baz"),
            ("Bar", "bam"),
        ]
