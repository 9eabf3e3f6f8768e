"""Tests for fabrik.resolve — ${...} references in declared values."""

import os

import pytest

from fabrik.resolve import Resolver, default_context
from fabrik.values import Lazy, Plain


class TestLookup:
    """Test lookup: dotted reference resolution against context."""

    def test_bare_reference(self):
        r = Resolver({"name": "myapp"})
        assert r.lookup("name") == "myapp"

    def test_dotted_reference_dict(self):
        r = Resolver({"settings": {"HOME": "/home/user"}})
        assert r.lookup("settings.HOME") == "/home/user"

    def test_dotted_reference_getattr(self):
        class Config:
            region = "us-east-1"

        r = Resolver({"config": Config()})
        assert r.lookup("config.region") == "us-east-1"

    def test_undefined_raises(self):
        r = Resolver({"name": "myapp"})
        with pytest.raises(ValueError, match="missing"):
            r.lookup("missing")

    def test_callable_value(self):
        r = Resolver({"today": lambda: "2026-01-01"})
        assert r.lookup("today") == "2026-01-01"

    def test_type_not_called(self):
        r = Resolver({"kind": int})
        assert r.lookup("kind") is int

    def test_env_available_by_default(self, monkeypatch):
        monkeypatch.setenv("FABRIK_TEST_VAR", "value")
        assert Resolver().lookup("env.FABRIK_TEST_VAR") == "value"

    def test_cwd_available_by_default(self):
        assert Resolver().lookup("CWD") == os.getcwd()

    def test_context_overrides_defaults(self):
        r = Resolver({"CWD": "/custom"})
        assert r.lookup("CWD") == "/custom"


class TestRender:
    def test_no_reference(self):
        assert Resolver().render("plain string") == "plain string"

    def test_whole_reference_preserves_type(self):
        r = Resolver({"count": 42})
        assert r.render("${count}") == 42

    def test_embedded_reference_stringifies(self):
        r = Resolver({"name": "app"})
        assert r.render("hello-${name}") == "hello-app"

    def test_multiple_references(self):
        r = Resolver({"host": "localhost", "port": 8080})
        assert r.render("${host}:${port}") == "localhost:8080"

    def test_escaped_reference(self):
        r = Resolver({"name": "app"})
        assert r.render("$${name}") == "${name}"

    def test_double_brace_passthrough(self):
        r = Resolver({"name": "app"})
        assert r.render("${{ name }}") == "${{ name }}"

    def test_undefined_in_string_raises(self):
        with pytest.raises(ValueError, match="nope"):
            Resolver().render("x-${nope}")


class TestValue:
    def test_plain_string(self):
        assert Resolver().value("plain") == Plain("plain")

    def test_non_string(self):
        assert Resolver().value(5) == Plain(5)

    def test_reference_is_deferred(self):
        context = {"name": "first"}
        r = Resolver(context)
        value = r.value("${name}")
        assert isinstance(value, Lazy)

    def test_deferred_reads_environment_at_evaluation(self, monkeypatch):
        value = Resolver().value("${env.FABRIK_LATE}")
        monkeypatch.setenv("FABRIK_LATE", "late")
        assert value.evaluate() == "late"


class TestDefaultContext:
    def test_contains_env_and_cwd(self):
        ctx = default_context()
        assert ctx["env"] is os.environ
        assert ctx["CWD"] is os.getcwd
