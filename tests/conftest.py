"""Keep the developer's pagemark environment out of every test"""

import pytest

from pagemark.config import ENV_PREFIX, Settings


@pytest.fixture(autouse=True)
def isolated_settings_env(monkeypatch):
    """Unset PAGEMARK_<FIELD> variables so load_config sees only what a test sets."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"{ENV_PREFIX}{name.upper()}", raising=False)
