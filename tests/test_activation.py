"""Tests for the activation store: idempotence, ordering, file format."""

import pytest

from pluginctl.plugins.activation import ActivationStore


@pytest.fixture
def store(tmp_path):
    return ActivationStore(tmp_path / ".active-plugins")


class TestEmptyStore:
    def test_missing_file_is_empty(self, store):
        assert store.list() == []
        assert store.count() == 0
        assert store.is_active("x") is False

    def test_disable_absent_writes_nothing(self, store):
        assert store.disable("x") is False
        assert not store.path.exists()

    def test_touch_creates_empty_file(self, store):
        assert store.touch() is True
        assert store.path.read_text() == ""
        assert store.touch() is False


class TestEnable:
    def test_adds_name(self, store):
        assert store.enable("x") is True
        assert store.is_active("x")
        assert store.path.read_text() == "x\n"

    def test_idempotent(self, store):
        store.enable("x")
        once = store.path.read_text()
        assert store.enable("x") is False
        assert store.path.read_text() == once
        assert store.list() == ["x"]

    def test_count(self, store):
        for name in ("a", "b", "c"):
            store.enable(name)
        assert store.count() == 3


class TestDisable:
    def test_removes_name(self, store):
        store.enable("x")
        assert store.disable("x") is True
        assert not store.is_active("x")
        assert store.path.read_text() == ""

    def test_idempotent(self, store):
        store.enable("x")
        store.enable("y")
        store.disable("x")
        once = store.path.read_text()
        assert store.disable("x") is False
        assert store.path.read_text() == once

    def test_keeps_order_of_remaining(self, store):
        for name in ("c", "a", "b"):
            store.enable(name)
        store.disable("a")
        assert store.list() == ["c", "b"]


class TestPersistence:
    def test_order_survives_new_instance(self, store):
        for name in ("c", "a", "b"):
            store.enable(name)
        assert ActivationStore(store.path).list() == ["c", "a", "b"]

    def test_blank_and_duplicate_lines_ignored(self, store):
        store.path.write_text("a\n\nb\na\n  \n")
        assert store.list() == ["a", "b"]
        assert store.count() == 2

    def test_unchanged_edit_does_not_rewrite(self, store):
        store.path.write_text("a\na\n")
        with store.edit():
            pass
        assert store.path.read_text() == "a\na\n"

    def test_edit_flushes_changes(self, store):
        with store.edit() as names:
            names["x"] = None
            names["y"] = None
        assert store.path.read_text() == "x\ny\n"

    def test_no_temp_file_left(self, store):
        store.enable("x")
        assert [p.name for p in store.path.parent.iterdir()] == [".active-plugins"]
