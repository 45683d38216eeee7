import os

import pytest

from archscan.core.config import config
from archscan.models.architecture import SoftwareSystem
from archscan.repository import PythonSourceTypeRepository

SAMPLE_APPS = os.path.join(os.path.dirname(__file__), 'fixtures', 'sample_apps')


@pytest.fixture(autouse=True)
def reset_config():
    config.reset()
    yield
    config.reset()


@pytest.fixture
def container():
    system = SoftwareSystem(name='Name', description='Description')
    return system.add_container('Name', 'Description', 'Technology')


@pytest.fixture(scope='session')
def sample_repository():
    return PythonSourceTypeRepository(SAMPLE_APPS)
