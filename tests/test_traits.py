"""Tests for fabrik.traits."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from fabrik.traits import Trait


class TestTrait:
    def test_create_with_name(self):
        t = Trait(name="admin", action=lambda: None)
        assert t.name == "admin"

    def test_apply_runs_action(self):
        calls = []
        t = Trait(name="admin", action=lambda: calls.append("admin"))
        t.apply()
        assert calls == ["admin"]

    def test_apply_runs_every_time(self):
        calls = []
        t = Trait(name="admin", action=lambda: calls.append(1))
        t.apply()
        t.apply()
        assert len(calls) == 2

    def test_action_must_be_callable(self):
        with pytest.raises(ValidationError):
            Trait(name="admin", action="not callable")

    def test_frozen(self):
        t = Trait(name="admin", action=lambda: None)
        with pytest.raises(ValidationError):
            t.name = "other"

    def test_logs_apply(self, caplog):
        t = Trait(name="admin", action=lambda: None)
        with caplog.at_level(logging.DEBUG, logger="fabrik.traits"):
            t.apply()
        assert "Applying trait 'admin'" in caplog.text
