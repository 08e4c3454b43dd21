"""Shared pytest fixtures for filterguard tests."""

from __future__ import annotations

import os

import pandas as pd
import pytest

from filterguard import reset_settings_cache
from filterguard.settings import ENV_PREFIX


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    """Run every test against default settings, unaffected by the host environment."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name, raising=False)
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def dirty_record() -> dict[str, object]:
    return {
        "key": "<b>ATTACK</b>",
        "xss": "<script>alert('XSS')</script>",
    }


@pytest.fixture
def form_payload() -> dict[str, object]:
    """A web form as it arrives from a request: everything is a string."""
    return {
        "user": {"name": "  <i>Ann</i> O'Neil ", "age": "42", "admin": "false"},
        "cart": [
            {"sku": "A-17", "qty": "3", "price": "19.99"},
            {"sku": "<img src=x onerror=alert(1)>B-02", "qty": "1", "price": "5.00"},
        ],
        "coupon": None,
        "newsletter": "true",
    }


@pytest.fixture
def sample_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "qty": ["7", "8", "9"],
            "price": ["1.50", "2.25", "10.xyz"],
            "note": ["<b>ok</b>", "fine", "a < b"],
        },
        index=["r1", "r2", "r3"],
    )
