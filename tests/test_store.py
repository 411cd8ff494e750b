"""
Tests for the JSON file store.
"""
import json
import os

import pytest

from errors import StorageError
from seed_data import DEFAULT_PORTFOLIO
from store import JsonFileStore, dump_document

from tests.conftest import make_document, read_document, write_document


def test_load_creates_file_from_seed(tmp_path):
    """A missing data file is created with the seed document."""
    path = tmp_path / 'nested' / 'portfolio.json'
    store = JsonFileStore(str(path))

    doc = store.load()

    assert doc == DEFAULT_PORTFOLIO
    assert path.exists()
    assert read_document(path) == DEFAULT_PORTFOLIO


def test_seed_is_not_shared_between_loads(tmp_path):
    store = JsonFileStore(str(tmp_path / 'portfolio.json'))
    doc = store.load()
    doc['skills'].clear()

    assert len(DEFAULT_PORTFOLIO['skills']) > 0


def test_load_malformed_json_raises(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text('{"skills": [', encoding='utf-8')

    with pytest.raises(StorageError):
        JsonFileStore(str(data_file)).load()


def test_load_non_object_raises(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text('[1, 2, 3]', encoding='utf-8')

    with pytest.raises(StorageError):
        JsonFileStore(str(data_file)).load()


def test_save_format_is_sorted_and_indented(store, data_file):
    assert store.save({'skills': [], 'personalInfo': {'name': 'Ada', 'email': 'a@b.c'}})

    content = data_file.read_text(encoding='utf-8')
    assert content == (
        '{\n'
        '  "personalInfo": {\n'
        '    "email": "a@b.c",\n'
        '    "name": "Ada"\n'
        '  },\n'
        '  "skills": []\n'
        '}\n'
    )


def test_save_keeps_non_ascii_readable(store, data_file):
    assert store.save({'personalInfo': {'location': 'Zürich'}})
    assert 'Zürich' in data_file.read_text(encoding='utf-8')


def test_save_load_round_trip_is_idempotent(store, data_file):
    assert store.save(store.load())
    first = data_file.read_bytes()

    assert store.save(store.load())
    assert data_file.read_bytes() == first
    assert store.load() == make_document()


def test_save_returns_false_on_unserializable_document(store, data_file):
    before = data_file.read_text(encoding='utf-8')

    assert store.save({'skills': {1, 2}}) is False
    assert data_file.read_text(encoding='utf-8') == before


def test_save_returns_false_when_target_is_a_directory(tmp_path):
    target = tmp_path / 'portfolio.json'
    target.mkdir()

    assert JsonFileStore(str(target)).save({'skills': []}) is False
    assert [name for name in os.listdir(tmp_path) if name.endswith('.tmp')] == []


def test_save_leaves_no_temp_files(store, data_file):
    store.save(make_document())
    leftovers = [name for name in os.listdir(data_file.parent) if name.endswith('.tmp')]
    assert leftovers == []


def test_commit_raises_when_save_fails(tmp_path):
    target = tmp_path / 'portfolio.json'
    target.mkdir()

    with pytest.raises(StorageError):
        JsonFileStore(str(target)).commit({'skills': []})


def test_out_of_band_edit_is_seen_on_next_load(store, data_file):
    store.load()
    edited = make_document()
    edited['skills'].append({'id': 1, 'name': 'Hand-edited', 'percentage': 10})
    write_document(data_file, edited)

    assert store.load()['skills'][0]['name'] == 'Hand-edited'


def test_transaction_persists_on_success(store, data_file):
    with store.transaction() as doc:
        doc['personalInfo']['name'] = 'Grace Hopper'

    assert read_document(data_file)['personalInfo']['name'] == 'Grace Hopper'


def test_transaction_skips_save_on_error(store, data_file):
    before = read_document(data_file)

    with pytest.raises(RuntimeError):
        with store.transaction() as doc:
            doc['skills'].append({'id': 1, 'name': 'Lost'})
            raise RuntimeError('boom')

    assert read_document(data_file) == before


def test_describe_reports_file_state(store, data_file):
    info = store.describe()

    assert info['backend'] == 'json'
    assert info['fileExists'] is True
    assert info['dataFile'] == os.path.abspath(str(data_file))


def test_dump_document_matches_json_module():
    doc = {'b': 1, 'a': [1, 2]}
    assert json.loads(dump_document(doc)) == doc
    assert dump_document(doc).endswith('\n')
