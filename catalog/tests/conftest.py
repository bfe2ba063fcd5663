from __future__ import annotations

import os
import tempfile
from pathlib import Path

# Must run before anything imports catalog: the configuration is cached on first load.
_TMP_ROOT = Path(tempfile.mkdtemp(prefix="catalog-tests-"))
os.environ.update(
    {
        "APP_ENV": "test",
        "DATABASE_URL": f"sqlite:///{_TMP_ROOT / 'catalog.db'}",
        "IMAGES_DIR": str(_TMP_ROOT / "images"),
        "LOG_FILE": str(_TMP_ROOT / "app.log"),
        "PUBLIC_ASSET_URL": "http://assets.test/static",
        "JWT_KEY": "access-secret-for-tests-0123456789abcdef",
        "JWT_REFRESH_KEY": "refresh-secret-for-tests-0123456789abcdef",
        "ENABLE_RATE_LIMIT": "false",
        "METRICS_ENABLED": "true",
        "SMTP_HOST": "",
    }
)

import pytest  # noqa: E402

from catalog.tests.fakes import Harness, build_harness  # noqa: E402


@pytest.fixture()
def tmp_root() -> Path:
    return _TMP_ROOT


@pytest.fixture()
def harness() -> Harness:
    return build_harness()
