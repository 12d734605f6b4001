"""Pytest configuration for dataknobs_refine tests."""

import sys
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_refine import CheckContext  # noqa: E402


@pytest.fixture
def context():
    """Context for a value nested two levels deep."""
    return CheckContext(
        path=("user", "name"),
        branch=({"user": {"name": "x"}}, {"name": "x"}, "x"),
    )
