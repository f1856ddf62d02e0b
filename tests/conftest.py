"""Shared fixtures for the Document Q&A test suite.

Builders and fakes live in :mod:`tests.fakes`; this module only wires
them into fixtures.
"""

import pytest

from src.config.settings import AppSettings
from tests.fakes import FakeProvider, build_pdf, build_xlsx


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@pytest.fixture
def xlsx_bytes():
    """A one-sheet workbook with rows [["a","b"],["1","2"]]."""
    return build_xlsx({"Sheet1": [["a", "b"], ["1", "2"]]})


@pytest.fixture
def pdf_bytes():
    return build_pdf(["Hello", "World"])


# ---------------------------------------------------------------------------
# Settings / provider
# ---------------------------------------------------------------------------

@pytest.fixture
def settings(tmp_path):
    """Settings with an isolated scratch directory."""
    return AppSettings(upload_dir=str(tmp_path / "uploads"))


@pytest.fixture
def fake_provider():
    return FakeProvider()
