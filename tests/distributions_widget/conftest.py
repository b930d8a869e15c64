# tests/distributions_widget/conftest.py
"""Fixtures for distributions widget tests."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest


def pytest_configure() -> None:
    # Ensure `src` is importable when running tests from the repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


# 2023-11-14 22:13:20 UTC
T0 = 1_700_000_000_000


@pytest.fixture
def scalars_payload() -> dict[str, Any]:
    """A /distributions response with a float, an int and a date-time field."""
    return {
        "distributions": [
            {
                "path": "uniqueness",
                "type": "FloatField",
                "ticks": 5,
                "data": [
                    {"key": 0.0, "count": 4, "edges": [0.0, 0.3332]},
                    {"key": 0.3332, "count": 7, "edges": [0.3332, 0.6664]},
                ],
            },
            {
                "path": "num_objects",
                "type": "IntField",
                "ticks": 0,
                "data": [
                    {"key": 0, "count": 1, "edges": [0, 10]},
                    {"key": 10, "count": 2, "edges": [10, 20]},
                ],
            },
            {
                "path": "created_at",
                "type": "DateTimeField",
                "ticks": 0,
                "data": [
                    {"key": T0, "count": 3, "edges": [{"$date": T0}, {"$date": T0 + 5250}]},
                ],
            },
        ]
    }


@pytest.fixture
def schema_fields() -> dict[str, str]:
    return {
        "uniqueness": "FloatField",
        "num_objects": "IntField",
        "created_at": "DateTimeField",
        "day": "DateField",
        "label": "StringField",
    }
