import sqlite3
import logging
from pathlib import Path

from errors import StoreError
from settings import DB_PATH
from utils import generate_id, timestamp

logger = logging.getLogger(__name__)

CREATE_ARTIFACTS_SQL = '''
CREATE TABLE IF NOT EXISTS artifacts (
    id TEXT PRIMARY KEY,
    id_number TEXT,
    name TEXT,
    description TEXT,
    photo_url TEXT NOT NULL,
    latitude REAL NOT NULL,
    longitude REAL NOT NULL,
    location_accuracy REAL,
    discovery_date TEXT,
    color TEXT,
    extracted_text TEXT,
    created_by TEXT,
    created_date TEXT
);
'''

CREATE_NOTES_SQL = '''
CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    content TEXT NOT NULL,
    is_private INTEGER NOT NULL DEFAULT 0,
    created_by TEXT,
    created_date TEXT
);
'''

# kind -> (table, client-writable columns)
KINDS = {
    'Artifact': ('artifacts', ['id_number', 'name', 'description', 'photo_url', 'latitude', 'longitude',
                               'location_accuracy', 'discovery_date', 'color', 'extracted_text']),
    'Note': ('notes', ['content', 'is_private']),
}

STORE_COLUMNS = ['id', 'created_by', 'created_date']


def get_conn(db_path=DB_PATH):
    if str(db_path) != ':memory:':
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute(CREATE_ARTIFACTS_SQL)
    conn.execute(CREATE_NOTES_SQL)
    conn.commit()
    return conn


def _table(kind):
    try:
        return KINDS[kind]
    except KeyError:
        raise StoreError(f'Unknown entity kind: {kind}')


def _order_by(kind, sort):
    # '-created_date' -> created_date DESC; rowid keeps insertion order for ties
    if not sort:
        return 'rowid ASC'
    field = sort.lstrip('-')
    _, columns = _table(kind)
    if field not in columns + STORE_COLUMNS:
        raise StoreError(f'Cannot sort {kind} by {field}')
    direction = 'DESC' if sort.startswith('-') else 'ASC'
    return f'{field} {direction}, rowid {direction}'


def list_entities(conn, kind, sort=None):
    table, _ = _table(kind)
    sql = f'SELECT * FROM {table} ORDER BY {_order_by(kind, sort)}'
    try:
        rows = conn.execute(sql).fetchall()
    except sqlite3.Error as e:
        raise StoreError(f'Listing {kind} failed: {e}') from e
    return [dict(r) for r in rows]


def get_entity(conn, kind, id_):
    table, _ = _table(kind)
    row = conn.execute(f'SELECT * FROM {table} WHERE id=?', (id_,)).fetchone()
    return dict(row) if row else None


def create_entity(conn, kind, data, created_by=None):
    """Insert a record; id, created_by and created_date are assigned here, never by the caller."""
    table, columns = _table(kind)
    record = {c: data.get(c) for c in columns}
    record['id'] = generate_id()
    record['created_by'] = created_by
    record['created_date'] = timestamp()
    names = list(record.keys())
    sql = f'INSERT INTO {table} ({", ".join(names)}) VALUES ({", ".join("?" for _ in names)})'
    try:
        conn.execute(sql, [record[n] for n in names])
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreError(f'Creating {kind} failed: {e}') from e
    logger.info('Created %s %s', kind, record['id'])
    return get_entity(conn, kind, record['id'])


def update_entity(conn, kind, id_, partial):
    table, columns = _table(kind)
    parts = []
    params = []
    for key, value in partial.items():
        if key not in columns:
            raise StoreError(f'{kind}.{key} is not writable')
        parts.append(f'{key}=?')
        params.append(value)
    if not parts:
        current = get_entity(conn, kind, id_)
        if current is None:
            raise StoreError(f'{kind} {id_} does not exist')
        return current
    params.append(id_)
    try:
        cur = conn.execute(f'UPDATE {table} SET {", ".join(parts)} WHERE id=?', params)
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreError(f'Updating {kind} {id_} failed: {e}') from e
    if cur.rowcount == 0:
        raise StoreError(f'{kind} {id_} does not exist')
    return get_entity(conn, kind, id_)


def delete_entity(conn, kind, id_):
    """Returns True if a row was removed; deleting a missing id is a no-op."""
    table, _ = _table(kind)
    try:
        cur = conn.execute(f'DELETE FROM {table} WHERE id=?', (id_,))
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        raise StoreError(f'Deleting {kind} {id_} failed: {e}') from e
    return cur.rowcount > 0
