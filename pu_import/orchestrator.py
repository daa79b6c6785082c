"""
Polling-unit import run.

Phases, in order:
    seeding              load states, LGAs and wards into a HierarchyIndex
    planning             one pass over the registry to plan missing LGAs/wards
    persisting_hierarchy write the planned LGAs, then wards
    clearing             (only with clear_existing) delete every polling unit
    loading_units        second pass: resolve each row to a ward, insert units

Progress is reported as event dicts passed to ``on_event``; every event carries
the current ``phase``. Any exception moves the run to ``failed`` (reported as
an event) and is re-raised unchanged. Nothing already written is rolled back.
"""
from pu_import.hierarchy import HierarchyIndex
from pu_import.loader import PU_BATCH, BulkLoader
from pu_import.planner import ReconciliationPlanner
from pu_import.records import parse_rows, read_lines
from pu_import.validate import build_polling_unit

PHASES = (
    'idle', 'seeding', 'planning', 'persisting_hierarchy',
    'clearing', 'loading_units', 'done', 'failed',
)


class ImportRun:
    def __init__(self, store, lines, clear_existing=False, dry_run=False, on_event=None):
        self.store = store
        self.lines = lines
        self.clear_existing = clear_existing
        self.dry_run = dry_run
        self.on_event = on_event
        self.phase = 'idle'
        self.loader = BulkLoader(store, on_event=self._emit_raw)
        self.index = None
        self.plan = None
        self.rows = []

    def _emit_raw(self, event):
        if self.on_event is not None:
            self.on_event(dict(event, phase=self.phase))

    def emit(self, event, **fields):
        self._emit_raw(dict(fields, event=event))

    def enter(self, phase):
        self.phase = phase
        self.emit('start')

    # ── phases ───────────────────────────────────────────────────────

    def seed(self):
        self.enter('seeding')
        self.index = HierarchyIndex.from_store(self.store)
        self.emit('seeded', duplicate_states=list(self.index.duplicate_states),
                  **self.index.counts())

    def plan_hierarchy(self):
        self.enter('planning')
        self.rows = list(parse_rows(self.lines))
        planner = ReconciliationPlanner(self.index)
        self.plan = planner.plan(row for _, row in self.rows)
        self.emit(
            'planned',
            total_records=len(self.lines),
            new_lgas=len(self.plan.lgas),
            new_wards=len(self.plan.wards),
            unresolved_states=dict(self.plan.unresolved_states),
        )

    def persist_hierarchy(self):
        self.enter('persisting_hierarchy')
        self.loader.persist_hierarchy(self.plan)

    def clear(self):
        self.enter('clearing')
        self.store.delete_all('polling_units')

    def load_units(self):
        """Resolve every row to a ward. Returns (matched, skipped)."""
        self.enter('loading_units')
        units = []
        skipped = 0
        for _, row in self.rows:
            ward_id = self.index.resolve_ward(row) if row is not None else None
            if ward_id is None:
                skipped += 1
                continue
            units.append(build_polling_unit(row, ward_id))
        if not self.dry_run:
            self.loader.insert_all('polling_units', units, PU_BATCH)
        return len(units), skipped

    # ── run ──────────────────────────────────────────────────────────

    def run(self):
        try:
            self.seed()
            self.plan_hierarchy()
            if not self.dry_run:
                self.persist_hierarchy()
                if self.clear_existing:
                    self.clear()
            matched, skipped = self.load_units()
            stats = {
                'total_records': len(self.lines),
                'matched': matched,
                'skipped': skipped,
                'new_lgas': len(self.plan.lgas),
                'new_wards': len(self.plan.wards),
                'total_polling_units': self.store.count('polling_units'),
            }
        except Exception as e:
            self.phase = 'failed'
            self.emit('error', error=e)
            raise
        self.phase = 'done'
        self.emit('done', **stats)
        return stats


def run_import(store, lines, clear_existing=False, dry_run=False, on_event=None):
    """
    Import registry data lines (header already removed) into ``store``.

    Returns {total_records, matched, skipped, new_lgas, new_wards,
    total_polling_units}. With ``dry_run`` nothing is written and
    ``total_polling_units`` is the count already in the database.
    """
    run = ImportRun(store, lines, clear_existing=clear_existing,
                    dry_run=dry_run, on_event=on_event)
    return run.run()


def import_file(store, path, **kwargs):
    return run_import(store, read_lines(path), **kwargs)
