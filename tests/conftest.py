"""Pytest configuration for repository-relative imports and shared sessions."""

import os
import sys

import matplotlib
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

matplotlib.use("Agg")

from dtakit.samples import sample_rows  # noqa: E402
from dtakit.session import Session, load_rows  # noqa: E402


@pytest.fixture
def sample_session():
    """Session loaded with the bundled Al-Si melting trace."""
    session = Session()
    assert load_rows(session, sample_rows(), source_name="Al-Si").ok
    return session
