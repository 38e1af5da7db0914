from pathlib import Path

import pytest

SAMPLES = Path(__file__).parent / 'samples'


@pytest.fixture
def read_sample():
    def _read(name: str) -> str:
        with open(SAMPLES / name, 'r', encoding='utf-8', newline='') as fp:
            return fp.read()
    return _read


@pytest.fixture
def sample_path():
    def _path(name: str) -> Path:
        return SAMPLES / name
    return _path
