import random

import pytest

from onething.config import StorageConfig
from onething.database.manager import JsonFileStore, MemoryStore
from onething.services.notifications import NotificationScheduler

from tests.helpers import FakeBackend, FakeClock, at


@pytest.fixture
def clock():
    return FakeClock(at(9, 0))


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def scheduler(backend):
    return NotificationScheduler(backend, rng=random.Random(42), title="One Thing",
                                 cutoff_time="21:00", anti_spam_minutes=60)


@pytest.fixture
def storage_config(tmp_path):
    return StorageConfig(data_dir=tmp_path / "data", backup_dir=tmp_path / "backups")


@pytest.fixture
def file_store(storage_config):
    return JsonFileStore(storage_config)


@pytest.fixture
def memory_store():
    return MemoryStore()
