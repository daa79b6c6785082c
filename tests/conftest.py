import itertools

import pytest

# Keys on which each table rejects a second row; inserts that collide are skipped.
UNIQUE_KEYS = {
    'states': [('id',)],
    'lgas': [('id',), ('code',), ('state_id', 'name')],
    'wards': [('id',), ('code',), ('lga_id', 'name')],
    'polling_units': [('unit_code',)],
}


class MemoryStore:
    """In-memory stand-in for SupabaseStore with ON CONFLICT DO NOTHING inserts."""

    def __init__(self):
        self.tables = {t: [] for t in UNIQUE_KEYS}
        self.insert_calls = []
        self.deletes = []
        self.fail_on_insert = None  # (table, call number) → raise
        self._ids = itertools.count(1)

    def select_all(self, table):
        return [dict(r) for r in self.tables[table]]

    def insert_ignore(self, table, rows):
        self.insert_calls.append((table, len(rows)))
        n = sum(1 for t, _ in self.insert_calls if t == table)
        if self.fail_on_insert == (table, n):
            raise ConnectionError(f'lost connection inserting {table}')
        written = 0
        for row in rows:
            existing = self.tables[table]
            clash = any(
                all(r.get(k) == row.get(k) for k in key)
                for key in UNIQUE_KEYS[table]
                for r in existing
            )
            if clash:
                continue
            row = dict(row)
            row.setdefault('id', f'pu-{next(self._ids)}')
            existing.append(row)
            written += 1
        return written

    def delete_all(self, table):
        self.deletes.append(table)
        self.tables[table] = []

    def count(self, table):
        return len(self.tables[table])


@pytest.fixture
def store():
    s = MemoryStore()
    s.tables['states'] = [
        {'id': 'st-lagos', 'name': 'Lagos'},
        {'id': 'st-kano', 'name': 'Kano'},
        {'id': 'st-fct', 'name': 'Federal Capital Territory'},
    ]
    s.tables['lgas'] = [
        {'id': 'lga-ikeja', 'name': 'Ikeja', 'code': 'LA-IKJ', 'state_id': 'st-lagos'},
        {'id': 'lga-amac', 'name': 'Abuja Municipal', 'code': 'FC-AMC', 'state_id': 'st-fct'},
    ]
    s.tables['wards'] = [
        {'id': 'ward-anifowoshe', 'name': 'Anifowoshe', 'code': 'LA-IKJ-01', 'lga_id': 'lga-ikeja'},
        {'id': 'ward-garki', 'name': 'Garki', 'code': 'FC-AMC-01', 'lga_id': 'lga-amac'},
    ]
    return s
