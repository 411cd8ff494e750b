"""Document stores for the portfolio data.

Both stores keep no in-memory copy: ``load()`` always goes back to disk (or
the database) so hand edits and other processes are visible on the next
request. Mutations go through ``transaction()``, which holds a per-store lock
around load, mutate and save.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from errors import ConfigError, StorageError
from models import db, PortfolioDocument, DOCUMENT_SLUG
from seed_data import default_document

logger = logging.getLogger(__name__)


def dump_document(doc):
    """Serialize a document the way it is written to disk"""
    return json.dumps(doc, ensure_ascii=False, indent=2, sort_keys=True) + '\n'


class BaseStore:
    """Shared commit/transaction behaviour; subclasses provide load() and save()"""

    backend = None

    def __init__(self, seed_factory=default_document):
        self.seed_factory = seed_factory
        self._lock = threading.Lock()

    def load(self):
        raise NotImplementedError

    def save(self, doc):
        raise NotImplementedError

    def describe(self):
        return {'backend': self.backend}

    def commit(self, doc):
        """Save and raise StorageError if the write did not happen"""
        if not self.save(doc):
            raise StorageError('Failed to save portfolio data')
        return doc

    @contextmanager
    def locked(self):
        """Serialize writers within this process"""
        with self._lock:
            yield

    @contextmanager
    def transaction(self):
        """Yield a freshly loaded document and persist it when the block exits cleanly.

        An exception raised inside the block skips the save, so a rejected
        request never touches the stored document.
        """
        with self.locked():
            doc = self.load()
            yield doc
            self.commit(doc)

    def _seed(self):
        doc = self.seed_factory()
        logger.info("No portfolio document found, creating it from seed data")
        self.commit(doc)
        return doc


class JsonFileStore(BaseStore):
    """Single JSON file on disk, human-editable"""

    backend = 'json'

    def __init__(self, path, seed_factory=default_document):
        super().__init__(seed_factory)
        self.path = path

    def load(self):
        if not os.path.exists(self.path):
            return self._seed()

        try:
            with open(self.path, 'r', encoding='utf-8') as file:
                data = json.load(file)
        except json.JSONDecodeError as e:
            logger.error(f"Malformed JSON in {self.path}: {str(e)}")
            raise StorageError('Portfolio data file contains malformed JSON', error=str(e)) from e
        except OSError as e:
            logger.error(f"Error reading {self.path}: {str(e)}")
            raise StorageError('Failed to read portfolio data', error=str(e)) from e

        if not isinstance(data, dict):
            raise StorageError('Portfolio data file must contain a JSON object')
        return data

    def save(self, doc):
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            content = dump_document(doc)
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.portfolio-', suffix='.tmp')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as file:
                    file.write(content)
                os.replace(tmp_path, self.path)
            except Exception:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving data to {self.path}: {str(e)}")
            return False
        return True

    def describe(self):
        return {
            'backend': self.backend,
            'dataFile': os.path.abspath(self.path),
            'fileExists': os.path.exists(self.path),
        }


class DatabaseStore(BaseStore):
    """The whole document as one JSON row, through Flask-SQLAlchemy.

    Needs an application context, like every other Flask-SQLAlchemy query.
    """

    backend = 'database'

    def __init__(self, slug=DOCUMENT_SLUG, seed_factory=default_document):
        super().__init__(seed_factory)
        self.slug = slug

    def _get_row(self):
        return PortfolioDocument.query.filter_by(slug=self.slug).first()

    def load(self):
        try:
            row = self._get_row()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error loading portfolio document: {str(e)}")
            raise StorageError('Failed to read portfolio data', error=str(e)) from e

        if row is None:
            return self._seed()
        if not isinstance(row.content, dict):
            raise StorageError('Stored portfolio document is not a JSON object')
        return copy.deepcopy(row.content)

    def save(self, doc):
        try:
            # Round-trip through the on-disk format so both backends accept the same documents
            content = json.loads(dump_document(doc))
            row = self._get_row()
            if row is None:
                db.session.add(PortfolioDocument(slug=self.slug, content=content))
            else:
                row.content = content
            db.session.commit()
        except (TypeError, ValueError) as e:
            logger.error(f"Error serializing portfolio document: {str(e)}")
            return False
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error saving portfolio document: {str(e)}")
            return False
        return True

    def describe(self):
        return {'backend': self.backend, 'document': self.slug}


def build_store(app):
    """Pick the store backend from app.config['STORAGE_BACKEND']"""
    backend = app.config.get('STORAGE_BACKEND', 'json')
    if backend == 'json':
        return JsonFileStore(app.config['DATA_FILE'])
    if backend == 'database':
        from db_init import init_db
        init_db(app)
        return DatabaseStore()
    raise ConfigError(f"Unknown storage backend: {backend}")
