"""Tests for the local seed script."""

from __future__ import annotations

import pytest

from backend.app.domain.entries import SqlEntryRepository
from scripts.seed_db import seed_entries

pytestmark = [pytest.mark.persistence]


def test_seed_entries_is_idempotent(sqlite_engine):
    assert seed_entries(sqlite_engine) == 3
    assert seed_entries(sqlite_engine) == 0

    names = [entry.name for entry in SqlEntryRepository(sqlite_engine).list()]
    assert sorted(names) == ["Ada Lovelace", "Alan Turing", "Grace Hopper"]
