"""Shared fixtures: an app wired to a temporary data file, plus direct store access."""
import json

import pytest

from app import create_app
from resources import Portfolio
from store import JsonFileStore

ADMIN_PIN = '4321'


def make_document():
    return {
        'personalInfo': {
            'name': 'Ada Lovelace',
            'title': 'Engineer',
            'email': 'ada@example.com',
            'social': {'github': 'https://github.com/ada', 'linkedin': 'https://linkedin.com/in/ada'},
        },
        'skills': [],
        'projects': [
            {'id': 100, 'title': 'Analytical Engine', 'description': 'Mechanical computer',
             'technologies': ['Brass', 'Punch cards'], 'featured': False, 'category': 'Hardware'},
        ],
        'services': [
            {'id': 200, 'title': 'Consulting', 'description': 'Algorithm design',
             'features': ['Notes', 'Diagrams'], 'featured': False, 'category': 'Advice'},
        ],
    }


def read_document(path):
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def write_document(path, doc):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(doc, indent=2), encoding='utf-8')


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / 'data' / 'portfolio.json'


@pytest.fixture
def backup_dir(tmp_path):
    return tmp_path / 'backups'


@pytest.fixture
def app_config(data_file, backup_dir):
    return {
        'TESTING': True,
        'STORAGE_BACKEND': 'json',
        'DATA_FILE': str(data_file),
        'BACKUP_DIR': str(backup_dir),
        'MAX_BACKUPS': 20,
        'ADMIN_PIN': ADMIN_PIN,
        'REQUIRE_PIN_FOR_WRITES': False,
        'ENFORCE_REQUIRED_FIELDS': True,
        'BACKUP_SCHEDULE_ENABLED': False,
    }


@pytest.fixture
def app(data_file, app_config):
    write_document(data_file, make_document())
    return create_app(app_config)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def store(data_file):
    write_document(data_file, make_document())
    return JsonFileStore(str(data_file))


@pytest.fixture
def portfolio(store):
    return Portfolio(store)
