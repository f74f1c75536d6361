import os
import shutil
import sys
import tempfile

# Repo root on sys.path so "risou" imports work without an install.
sys.path.append(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

# Must be set before risou.db is imported anywhere; test modules import the
# app at collection time, so a fixture would be too late.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="risou-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'risou_test.db')}"
os.environ["REMOTE_ENABLED"] = "0"

import pytest  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _fresh_test_database():
    yield
    from risou.db import engine

    engine.dispose()
    shutil.rmtree(_TEST_DB_DIR, ignore_errors=True)


def first_option(options):
    return options[0]


@pytest.fixture
def chooser():
    """Deterministic replacement for random.choice in template text."""
    return first_option
