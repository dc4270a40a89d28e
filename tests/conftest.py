# tests/conftest.py
# Put the project root (the folder that contains 'scratchblocks' and 'tests') on sys.path
# so `import scratchblocks` works without installing the package.

import sys
import pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from scratchblocks.database import BlockDatabase  # noqa: E402


@pytest.fixture(scope="session")
def database():
    return BlockDatabase()


@pytest.fixture
def german():
    return BlockDatabase.withLanguages("de")
