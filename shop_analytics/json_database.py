"""
JSON file record store.

The whole document is loaded on every read and rewritten on every mutation;
there is no locking, so two concurrent writers can lose an update.
"""
import json
import logging
import math

from .collection_names import COLLECTIONS

MAX_RECORDS_PER_COLLECTION = 20

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """The JSON document could not be read or parsed."""


class CapacityExceededError(Exception):
    """A collection already holds MAX_RECORDS_PER_COLLECTION records."""


def numeric_id(value):
    """Return value as a finite number, or None when it is not one"""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def is_plain_object(value):
    return isinstance(value, dict)


class JsonDatabase:
    def __init__(self, path):
        self.path = path

    def read_database(self):
        """Load the full snapshot; missing or malformed collections become []"""
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                parsed = json.load(f)
        except (OSError, ValueError) as e:
            raise DatabaseError(f'Failed to read database at {self.path}: {e}') from e

        if not isinstance(parsed, dict):
            raise DatabaseError(f'Database at {self.path} is not a JSON object')

        for collection in COLLECTIONS:
            if not isinstance(parsed.get(collection), list):
                parsed[collection] = []
        return parsed

    def write_database(self, database):
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(database, f, indent=2, ensure_ascii=False)

    def get_collection(self, name):
        """All records of a collection, sorted by numeric id (non-numeric ids sort as 0)"""
        records = self.read_database()[name]
        return sorted(records, key=lambda r: numeric_id(r.get('id')) or 0)

    def find_record(self, name, record_id):
        for record in self.get_collection(name):
            if numeric_id(record.get('id')) == record_id:
                return record
        return None

    def add_record(self, name, payload):
        database = self.read_database()
        collection = database[name]

        if len(collection) >= MAX_RECORDS_PER_COLLECTION:
            raise CapacityExceededError(
                f'Cannot add more than {MAX_RECORDS_PER_COLLECTION} records to {name}. '
                f'Delete a record first.'
            )

        used_ids = set()
        for item in collection:
            value = numeric_id(item.get('id'))
            if value is not None and value > 0:
                used_ids.add(value)

        next_id = 1
        while next_id in used_ids:
            next_id += 1

        record = {**payload, 'id': next_id}
        collection.append(record)
        self.write_database(database)
        logger.info('Added record %s to %s', next_id, name)
        return record

    def update_record(self, name, record_id, updates):
        """Shallow-merge updates into a record; the id is never overwritten"""
        database = self.read_database()
        collection = database[name]

        for index, item in enumerate(collection):
            if numeric_id(item.get('id')) == record_id:
                break
        else:
            return None

        updated = {**collection[index], **updates, 'id': record_id}
        collection[index] = updated
        self.write_database(database)
        logger.info('Updated record %s in %s', record_id, name)
        return updated

    def remove_record(self, name, record_id):
        database = self.read_database()
        collection = database[name]

        for index, item in enumerate(collection):
            if numeric_id(item.get('id')) == record_id:
                del collection[index]
                self.write_database(database)
                logger.info('Removed record %s from %s', record_id, name)
                return True
        return False
