"""
Goal / theme preferences: cached value, persistence and listeners.
"""
from __future__ import annotations

import json

from core.models.prefs import Theme, resolve_theme
from services.prefs import (
    CALORIE_GOAL_KEY,
    THEME_KEY,
    PreferenceService,
    SettingsFile,
)


def test_defaults_when_nothing_stored(prefs):
    assert prefs.goal.get() == 2000
    assert prefs.theme.get() is None


def test_values_persist_as_plain_strings(tmp_path):
    path = tmp_path / "prefs.json"
    svc = PreferenceService(SettingsFile(path)).load()

    svc.goal.set(1800)
    svc.theme.set(Theme.dark)

    assert json.loads(path.read_text()) == {CALORIE_GOAL_KEY: "1800", THEME_KEY: "dark"}
    reloaded = PreferenceService(SettingsFile(path)).load()
    assert (reloaded.goal.get(), reloaded.theme.get()) == (1800, Theme.dark)

    svc.theme.set(None)
    assert THEME_KEY not in json.loads(path.read_text())


def test_subscribe_is_called_immediately_then_on_change(prefs):
    seen_a, seen_b = [], []
    unsub_a = prefs.goal.subscribe(seen_a.append)
    prefs.goal.subscribe(seen_b.append)

    prefs.goal.set(2500)
    unsub_a()
    prefs.goal.set(1500)

    assert seen_a == [2000, 2500]
    assert seen_b == [2000, 2500, 1500]


def test_listeners_run_in_registration_order(prefs):
    calls = []
    prefs.theme.subscribe(lambda v: calls.append(("first", v)))
    prefs.theme.subscribe(lambda v: calls.append(("second", v)))
    calls.clear()

    prefs.theme.set(Theme.light)

    assert calls == [("first", Theme.light), ("second", Theme.light)]


def test_persistence_failure_is_swallowed(tmp_path, caplog):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    svc = PreferenceService(SettingsFile(blocker / "prefs.json")).load()
    seen = []
    svc.goal.subscribe(seen.append)

    svc.goal.set(3000)

    assert svc.goal.get() == 3000
    assert seen == [2000, 3000]
    assert "could not persist preference" in caplog.text


def test_corrupt_settings_fall_back_to_defaults(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({CALORIE_GOAL_KEY: "lots", THEME_KEY: "sepia"}))

    svc = PreferenceService(SettingsFile(path), default_goal=2200).load()

    assert svc.goal.get() == 2200
    assert svc.theme.get() is None


def test_resolve_theme():
    assert resolve_theme(Theme.dark, "light") is Theme.dark
    assert resolve_theme(None, "dark") is Theme.dark
    assert resolve_theme(None, "light") is Theme.light
    assert resolve_theme(None, None) is Theme.light
