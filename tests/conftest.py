import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from scansion.core import MeterAnalyzer, PronunciationStore

DATA_DIR = Path(__file__).resolve().parent / "data"
MINI_DICT_PATH = DATA_DIR / "mini_cmudict.txt"


def read_poem(name: str) -> str:
    return (DATA_DIR / name).read_text(encoding="utf-8")


@pytest.fixture
def mini_dict_path() -> Path:
    return MINI_DICT_PATH


@pytest.fixture
def store():
    """Fresh store loaded from the hand-written test dictionary."""

    pronunciation_store = PronunciationStore()
    pronunciation_store.load(MINI_DICT_PATH)
    return pronunciation_store


@pytest.fixture
def analyzer(store):
    return MeterAnalyzer(store)


@pytest.fixture
def sonnet_18() -> str:
    return read_poem("sonnet_18.txt")


@pytest.fixture
def the_tyger() -> str:
    return read_poem("the_tyger.txt")


@pytest.fixture
def red_wheelbarrow() -> str:
    return read_poem("red_wheelbarrow.txt")


@pytest.fixture(scope="session")
def cmu_store():
    """Store loaded once per session from the CMU dictionary bundled with pronouncing."""

    pronunciation_store = PronunciationStore()
    pronunciation_store.load()
    return pronunciation_store
