"""Portfolio resources: the skills/projects/services collections and the personal-info singleton.

Every operation loads the document from the store, changes one collection
or field, and writes the whole document back inside ``store.transaction()``.
Request bodies never get spread over stored records directly; each resource
has an explicit whitelist of fields it accepts.
"""
import copy
import logging
import time

from errors import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

SKILL_FIELDS = ('name', 'percentage', 'category', 'description', 'icon')
PROJECT_FIELDS = ('title', 'description', 'technologies', 'image', 'github',
                  'live', 'demo', 'featured', 'category')
SERVICE_FIELDS = ('title', 'description', 'icon', 'category', 'features',
                  'price', 'featured')
PERSONAL_INFO_FIELDS = ('name', 'title', 'bio', 'description', 'email', 'phone',
                        'location', 'linkedin', 'github', 'twitter', 'website',
                        'resume', 'photo', 'social')

TEXT_FIELDS = {'name', 'title', 'description', 'category', 'icon', 'price',
               'github', 'live', 'demo', 'image'}

COLLECTION_KEYS = ('skills', 'projects', 'services')
SORT_ORDERS = ('oldest', 'newest', 'title', 'name')
TRUTHY_STRINGS = {'true', '1', 'on', 'yes'}


def split_list(value, delimiter):
    """Accept a list or a delimited string; return stripped, non-empty strings in order"""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(delimiter)
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ValidationError('Expected a list of strings or a delimited string')
    return [str(item).strip() for item in items if str(item).strip()]


def split_technologies(value):
    return split_list(value, ',')


def split_features(value):
    return split_list(value, '\n')


def coerce_bool(value):
    """Form submissions send 'true'/'on'; JSON clients send real booleans"""
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return bool(value)


def coerce_percentage(value):
    if isinstance(value, bool):
        raise ValidationError('Percentage must be a number between 0 and 100')
    try:
        percentage = int(float(value))
    except (TypeError, ValueError, OverflowError):
        raise ValidationError('Percentage must be a number between 0 and 100')
    if not 0 <= percentage <= 100:
        raise ValidationError('Percentage must be between 0 and 100')
    return percentage


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _now_millis():
    return int(time.time() * 1000)


def check_text(field, value):
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"Field '{field}' must be a string")
    return value


def validate_document(doc):
    """Check a whole document before it replaces the stored one.

    Collections must be lists of objects with unique integer ids; skill
    percentages must lie in 0..100 and display fields must be strings.
    """
    if not isinstance(doc, dict):
        raise ValidationError('Portfolio data must be a JSON object')
    if PersonalInfo.key in doc and not isinstance(doc[PersonalInfo.key], dict):
        raise ValidationError(f"Field '{PersonalInfo.key}' must be a JSON object")

    for key in COLLECTION_KEYS:
        items = doc.get(key)
        if items is None:
            continue
        if not isinstance(items, list):
            raise ValidationError(f"Field '{key}' must be a list")

        seen = set()
        for item in items:
            if not isinstance(item, dict):
                raise ValidationError(f"Every entry in '{key}' must be a JSON object")
            record_id = item.get('id')
            if not isinstance(record_id, int) or isinstance(record_id, bool):
                raise ValidationError(f"Every entry in '{key}' needs an integer id")
            if record_id in seen:
                raise ValidationError(f"Duplicate id {record_id} in '{key}'")
            seen.add(record_id)
            for field in TEXT_FIELDS & item.keys():
                check_text(field, item[field])
            if key == 'skills' and 'percentage' in item:
                coerce_percentage(item['percentage'])
    return doc


class ResourceCollection:
    """CRUD over one named array inside the portfolio document"""

    def __init__(self, store, key, label, fields, required=(), defaults=None,
                 normalizers=None, enforce_required=True, sort_field='title'):
        self.store = store
        self.key = key
        self.label = label
        self.fields = fields
        self.required = required
        self.defaults = defaults or {}
        self.normalizers = normalizers or {}
        self.enforce_required = enforce_required
        self.sort_field = sort_field

    def _clean(self, data):
        """Keep whitelisted fields only and normalize them"""
        if not isinstance(data, dict):
            raise ValidationError(f'{self.label} data must be a JSON object')

        cleaned = {}
        for field in self.fields:
            if field not in data:
                continue
            value = data[field]
            normalizer = self.normalizers.get(field)
            if normalizer:
                value = normalizer(value)
            elif field in TEXT_FIELDS:
                value = check_text(field, value)
                if value is not None:
                    value = value.strip()
            cleaned[field] = value
        return cleaned

    def _validate(self, record):
        if not self.enforce_required:
            return
        missing = [field for field in self.required if _is_blank(record.get(field))]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    def _items(self, doc):
        items = doc.get(self.key)
        if items is None:
            items = doc[self.key] = []
        if not isinstance(items, list):
            raise StorageError(f"Portfolio field '{self.key}' is not a list")
        return items

    def _index_of(self, items, record_id):
        for index, item in enumerate(items):
            if isinstance(item, dict) and item.get('id') == record_id:
                return index
        raise NotFoundError(f'{self.label} not found')

    @staticmethod
    def _next_id(items):
        """Millisecond timestamp, bumped past the current maximum so ids never repeat"""
        new_id = _now_millis()
        for item in items:
            existing = item.get('id') if isinstance(item, dict) else None
            if isinstance(existing, int) and existing >= new_id:
                new_id = existing + 1
        return new_id

    def list(self, featured=None, sort=None, limit=None):
        items = list(self._items(self.store.load()))

        if featured is not None:
            items = [item for item in items if coerce_bool(item.get('featured', False)) == featured]

        if sort in (None, '', 'oldest'):
            pass
        elif sort == 'newest':
            items.reverse()
        elif sort in ('title', 'name'):
            items.sort(key=lambda item: str(item.get(self.sort_field) or '').lower())
        else:
            raise ValidationError(f"Unknown sort order '{sort}', expected one of: {', '.join(SORT_ORDERS)}")

        if limit is not None:
            if limit < 0:
                raise ValidationError('Limit must not be negative')
            items = items[:limit]
        return items

    def get(self, record_id):
        items = self._items(self.store.load())
        return items[self._index_of(items, record_id)]

    def create(self, data):
        fields = self._clean(data)
        with self.store.transaction() as doc:
            items = self._items(doc)
            record = {**copy.deepcopy(self.defaults), **fields}
            self._validate(record)
            record['id'] = self._next_id(items)
            items.append(record)
        logger.info(f"Created {self.label.lower()} {record['id']}")
        return record

    def update(self, record_id, patch):
        fields = self._clean(patch)
        with self.store.transaction() as doc:
            items = self._items(doc)
            index = self._index_of(items, record_id)
            current = items[index]
            record = {**current, **fields, 'id': current['id']}
            self._validate(record)
            items[index] = record
        return record

    def delete(self, record_id):
        with self.store.transaction() as doc:
            items = self._items(doc)
            record = items.pop(self._index_of(items, record_id))
        logger.info(f"Deleted {self.label.lower()} {record_id}")
        return record


class ProjectCollection(ResourceCollection):

    def toggle_featured(self, record_id):
        with self.store.transaction() as doc:
            items = self._items(doc)
            record = items[self._index_of(items, record_id)]
            record['featured'] = not coerce_bool(record.get('featured', False))
        return record


class PersonalInfo:
    """The personalInfo object: field-level overwrite, `social` merged one level deep"""

    key = 'personalInfo'

    def __init__(self, store):
        self.store = store

    @staticmethod
    def _current(doc):
        current = doc.get(PersonalInfo.key)
        return current if isinstance(current, dict) else {}

    def get(self):
        return self._current(self.store.load())

    def update(self, patch):
        if not isinstance(patch, dict):
            raise ValidationError('Personal info must be a JSON object')
        fields = {field: patch[field] for field in PERSONAL_INFO_FIELDS if field in patch}
        for field, value in fields.items():
            if field != 'social':
                check_text(field, value)
        social = fields.get('social')
        if social is not None and not isinstance(social, dict):
            raise ValidationError("Field 'social' must be a JSON object")

        with self.store.transaction() as doc:
            current = self._current(doc)
            merged = {**current, **fields}
            if social is not None:
                previous = current.get('social')
                merged['social'] = {**(previous if isinstance(previous, dict) else {}), **social}
            doc[self.key] = merged
        return merged


class Portfolio:
    """Entry point the HTTP layer talks to; one instance per store"""

    def __init__(self, store, enforce_required=True):
        self.store = store
        self.skills = ResourceCollection(
            store, 'skills', 'Skill', SKILL_FIELDS,
            required=('name',),
            defaults={'percentage': 0, 'category': 'General'},
            normalizers={'percentage': coerce_percentage},
            enforce_required=enforce_required,
            sort_field='name',
        )
        self.projects = ProjectCollection(
            store, 'projects', 'Project', PROJECT_FIELDS,
            required=('title', 'description'),
            defaults={'technologies': [], 'featured': False, 'category': 'General'},
            normalizers={'technologies': split_technologies, 'featured': coerce_bool},
            enforce_required=enforce_required,
        )
        self.services = ResourceCollection(
            store, 'services', 'Service', SERVICE_FIELDS,
            required=('title', 'description'),
            defaults={'features': [], 'featured': False, 'category': 'General'},
            normalizers={'features': split_features, 'featured': coerce_bool},
            enforce_required=enforce_required,
        )
        self.personal_info = PersonalInfo(store)

    def collection(self, key):
        return getattr(self, key)

    def document(self):
        return self.store.load()

    def replace(self, new_doc):
        """Overwrite the whole document, e.g. from an exported copy"""
        validate_document(new_doc)

        with self.store.transaction() as doc:
            doc.clear()
            doc.update(copy.deepcopy(new_doc))
        logger.info("Portfolio document replaced")
        return doc

    def stats(self):
        doc = self.store.load()
        counts = {}
        for key in COLLECTION_KEYS:
            items = doc.get(key)
            counts[f'{key}Count'] = len(items) if isinstance(items, list) else 0
        return {**counts, **self.store.describe()}
