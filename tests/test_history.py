"""
Tests historique undo/redo
  History(initial, limit)   push / undo / redo / current
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from block_editor import config
from block_editor.history import History


def filled(n, limit=None):
    """Historique frais (S0) + n pushes S1..Sn."""
    history = History("S0", limit=limit)
    for i in range(1, n + 1):
        history.push(f"S{i}")
    return history


# ── Navigation ────────────────────────────────────────────────────────────

def test_fresh_history():
    history = History("S0")
    assert history.current() == "S0"
    assert not history.can_undo
    assert not history.can_redo
    assert len(history) == 1


def test_undo_redo_walk():
    history = filled(2)
    assert history.undo() == "S1"
    assert history.undo() == "S0"
    assert history.redo() == "S1"
    assert history.index == 1


def test_undo_at_start_is_noop():
    history = History("S0")
    assert history.undo() == "S0"
    assert history.index == 0


def test_redo_at_end_is_noop():
    history = filled(1)
    assert history.redo() == "S1"
    assert history.index == 1


def test_snapshots_are_returned_by_reference():
    tree = [object()]
    history = History([])
    history.push(tree)
    assert history.current() is tree


# ── Branche abandonnée ────────────────────────────────────────────────────

def test_push_after_undo_discards_redo_branch():
    history = filled(2)
    assert history.index == 2
    history.undo()
    assert history.index == 1
    history.push("S3")
    assert history.entries == ("S0", "S1", "S3")
    assert history.index == 2
    assert not history.can_redo
    assert history.redo() == "S3"


# ── Limite ────────────────────────────────────────────────────────────────

def test_cap_evicts_oldest():
    history = filled(60)
    assert len(history) == 50
    assert history.current() == "S60"
    for _ in range(49):
        history.undo()
    assert history.current() == "S11"
    assert not history.can_undo


def test_custom_limit():
    history = filled(5, limit=3)
    assert history.entries == ("S3", "S4", "S5")
    assert history.index == 2


def test_limit_from_settings(monkeypatch):
    monkeypatch.setattr(config, "settings", config.EditorSettings(history_limit=2))
    history = filled(3)
    assert history.entries == ("S2", "S3")


def test_invalid_limit():
    with pytest.raises(ValueError):
        History("S0", limit=0)
