import pytest


@pytest.fixture(autouse=True)
def use_80_columns(monkeypatch):
    """Override the COLUMNS environment variable to 80.

    This matches the terminal width assumed by the printed tree tests.
    """
    monkeypatch.setenv("COLUMNS", "80")
