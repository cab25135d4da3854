import os

import pytest

from travelsplit.config import ENV_PREFIX


@pytest.fixture
def clean_env(monkeypatch):
    """No TRAVELSPLIT_* variables before the test, none left behind after it."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    yield monkeypatch
    # load_dotenv writes straight into os.environ
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            del os.environ[key]
