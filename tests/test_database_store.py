"""
Tests for the Flask-SQLAlchemy storage backend.
"""
import pytest

from app import create_app
from db_init import get_portfolio_document
from models import db
from seed_data import DEFAULT_PORTFOLIO
from store import DatabaseStore


@pytest.fixture
def db_app(tmp_path, app_config):
    return create_app({
        **app_config,
        'STORAGE_BACKEND': 'database',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'portfolio.db'}",
    })


@pytest.fixture
def db_client(db_app):
    return db_app.test_client()


def test_init_db_seeds_document(db_app):
    with db_app.app_context():
        row = get_portfolio_document()
        assert row is not None
        assert row.content == DEFAULT_PORTFOLIO


def test_database_store_round_trip(db_app):
    with db_app.app_context():
        store = db_app.extensions['portfolio_store']
        assert isinstance(store, DatabaseStore)

        doc = store.load()
        doc['personalInfo']['name'] = 'Grace Hopper'
        assert store.save(doc) is True

        assert store.load()['personalInfo']['name'] == 'Grace Hopper'
        assert store.save(store.load()) is True
        assert store.load() == doc


def test_database_store_loads_copies(db_app):
    with db_app.app_context():
        store = db_app.extensions['portfolio_store']
        store.load()['skills'].clear()

        assert store.load()['skills'] == DEFAULT_PORTFOLIO['skills']


def test_database_store_seeds_missing_row(db_app):
    with db_app.app_context():
        db.session.delete(get_portfolio_document())
        db.session.commit()

        assert DatabaseStore().load() == DEFAULT_PORTFOLIO
        assert get_portfolio_document() is not None


def test_database_store_rejects_unserializable(db_app):
    with db_app.app_context():
        assert DatabaseStore().save({'skills': {1, 2}}) is False


def test_database_backend_crud_over_http(db_client):
    r = db_client.get('/api/health')
    assert r.json['storage'] == 'database'

    r = db_client.post('/api/skills', json={'name': 'Go', 'percentage': 70, 'category': 'Backend'})
    assert r.status_code == 201
    skill_id = r.json['id']

    r = db_client.put(f'/api/skills/{skill_id}', json={'percentage': 75})
    assert r.json['percentage'] == 75

    names = [s['name'] for s in db_client.get('/api/skills').json]
    assert names[-1] == 'Go'

    assert db_client.delete(f'/api/skills/{skill_id}').status_code == 200
    assert db_client.delete(f'/api/skills/{skill_id}').status_code == 404


def test_database_backend_toggle_featured(db_client):
    project_id = db_client.get('/api/projects').json[1]['id']

    assert db_client.patch(f'/api/projects/{project_id}/toggle-featured').json['featured'] is True
    assert db_client.patch(f'/api/projects/{project_id}/toggle-featured').json['featured'] is False
