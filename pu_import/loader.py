"""
Chunked, conflict-skipping writes.

Chunks go out one at a time. A failing chunk raises straight through to the
caller; chunks already written stay in the database.
"""
LGA_BATCH = 200
WARD_BATCH = 500
PU_BATCH = 1000


def _ignore(event):
    pass


class BulkLoader:
    def __init__(self, store, on_event=None):
        self.store = store
        self.on_event = on_event or _ignore

    def insert_all(self, table, rows, batch_size):
        """Insert rows in chunks of batch_size. Returns the number of rows written."""
        written = 0
        for start in range(0, len(rows), batch_size):
            chunk = rows[start:start + batch_size]
            written += self.store.insert_ignore(table, chunk) or 0
            self.on_event({
                'event': 'chunk',
                'table': table,
                'done': min(start + batch_size, len(rows)),
                'total': len(rows),
            })
        return written

    def persist_hierarchy(self, plan):
        """LGAs first, then wards: a ward's LGA must exist before the ward."""
        self.insert_all('lgas', plan.lgas, LGA_BATCH)
        self.insert_all('wards', plan.wards, WARD_BATCH)
