"""Unit tests for Context."""

from __future__ import annotations

import pytest

from tada.context import Context


class TestContextGet:
    """Tests for Context.get()."""

    def test_get_stored_value(self):
        """Stored values are returned."""
        ctx = Context({"a": 1})
        assert ctx.get("a") == 1
        assert ctx["a"] == 1

    def test_missing_key_raises(self):
        """An absent key without a default raises KeyError."""
        with pytest.raises(KeyError):
            Context().get("missing")

    def test_default_producer(self):
        """The default producer supplies a value for absent keys."""
        ctx = Context()
        assert ctx.get("missing", lambda: 5) == 5
        assert "missing" not in ctx

    def test_default_not_called_when_present(self):
        """The producer is not invoked when the key exists."""
        calls = []
        ctx = Context({"a": None})
        assert ctx.get("a", lambda: calls.append(1)) is None
        assert calls == []

    def test_non_callable_default_rejected(self):
        """Defaults must be producers, not plain values."""
        with pytest.raises(TypeError):
            Context().get("missing", 5)


class TestContextSetAndCopy:
    """Tests for Context.set() and Context.copy()."""

    def test_set_overwrites(self):
        """set() replaces existing values."""
        ctx = Context()
        ctx.set("a", 1)
        ctx["a"] = 2
        assert ctx.get("a") == 2

    def test_copy_sees_existing_values(self):
        """A copy holds everything present at copy time."""
        ctx = Context({"a": 1})
        assert ctx.copy().get("a") == 1

    def test_copy_set_does_not_leak_back(self):
        """Setting a key on the copy leaves the original unchanged."""
        ctx = Context({"k": "v1"})
        fork = ctx.copy()
        fork.set("k", "v2")
        fork.set("new", 1)
        assert ctx.get("k") == "v1"
        assert "new" not in ctx

    def test_original_set_does_not_reach_copy(self):
        """Keys set on the original after forking stay out of the copy."""
        ctx = Context()
        fork = ctx.copy()
        ctx.set("late", True)
        assert "late" not in fork

    def test_copy_is_shallow(self):
        """Values are shared by reference, not duplicated."""
        items: list[int] = []
        ctx = Context({"items": items})
        ctx.copy().get("items").append(1)
        assert ctx.get("items") == [1]

    def test_copy_keeps_subclass(self):
        """Copies have the same type as the original."""

        class MyContext(Context):
            pass

        assert type(MyContext().copy()) is MyContext
