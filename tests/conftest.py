import os
import sys

import pytest

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.dirname(CURRENT_DIR)
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient

from registrar.api import RegistrarRestAPI
from registrar.config import RegistrarConfig
from registrar.persistence import CsvRowStore
from registrar.services import Registrar


@pytest.fixture
def data_dir(tmp_path):
    """Directory holding the CSV files for one test."""
    return tmp_path / "data"


@pytest.fixture
def config(data_dir):
    return RegistrarConfig(data_dir=str(data_dir))


@pytest.fixture
def store(data_dir):
    return CsvRowStore(str(data_dir))


@pytest.fixture
def registrar(store, config):
    """Registrar bootstrapped from empty storage, so demo data is seeded."""
    return Registrar(store, config)


@pytest.fixture
def empty_registrar(store, data_dir):
    """Registrar with demo seeding switched off."""
    return Registrar(store, RegistrarConfig(data_dir=str(data_dir), seed_demo_data=False))


@pytest.fixture
def read_lines(data_dir):
    """Read a data file as a list of lines."""
    def _read(name):
        path = data_dir / name
        if not path.exists():
            return []
        return path.read_text(encoding="utf-8").splitlines()
    return _read


@pytest.fixture
def api(registrar):
    return RegistrarRestAPI(registrar)


@pytest.fixture
def client(api):
    with TestClient(api.app) as test_client:
        yield test_client
