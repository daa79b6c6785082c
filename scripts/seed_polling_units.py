#!/usr/bin/env python3
"""
Seed polling units from the INEC polling-unit registry CSV.

Creates any LGAs and wards the registry mentions that are missing from the
database, then inserts one polling unit per matched row. Unit codes come from
the row's position in the file (PU-000001, ...).

Additive by default: existing polling units are kept and rows whose unit code
already exists are skipped. --clear-existing deletes ALL polling units first.

Usage:
    python3 scripts/seed_polling_units.py --dry-run
    python3 scripts/seed_polling_units.py
    python3 scripts/seed_polling_units.py --clear-existing
    python3 scripts/seed_polling_units.py --input /tmp/polling-units.csv
"""
import sys
import argparse

import sys as _sys, os as _os
_sys.path.insert(0, _os.path.join(_os.path.dirname(_os.path.abspath(__file__)), '..'))
from pu_import import import_file
from pu_import.store import SupabaseStore
from db_config import POLLING_UNITS_CSV

INPUT_PATH = POLLING_UNITS_CSV

PHASE_TITLES = {
    'seeding': 'Loading existing administrative data...',
    'planning': 'Phase 1: Planning missing LGAs and wards...',
    'persisting_hierarchy': 'Phase 1: Creating missing LGAs and wards...',
    'clearing': 'Phase 2: Clearing existing polling units...',
    'loading_units': 'Phase 3: Inserting polling units...',
}


def print_event(event):
    kind = event['event']
    if kind == 'start':
        title = PHASE_TITLES.get(event['phase'])
        if title:
            print(title)
    elif kind == 'seeded':
        print(f"  Found: {event['states']} states, {event['lgas']} LGAs, {event['wards']} wards")
        for name in event.get('duplicate_states', []):
            print(f"  NOTE: state '{name}' has the same key as an earlier state; using the earlier one")
    elif kind == 'planned':
        print(f"  Total records: {event['total_records']}")
        print(f"  Need to create {event['new_lgas']} new LGAs, {event['new_wards']} new wards")
        unresolved = event['unresolved_states']
        if unresolved:
            print(f"  Unmatched state names ({len(unresolved)}):")
            for key, n in sorted(unresolved.items(), key=lambda kv: -kv[1]):
                print(f"    {key}: {n} rows")
    elif kind == 'chunk':
        print(f"  {event['table']}: {event['done']}/{event['total']}")
    elif kind == 'error':
        print(f"  FAILED during {event['phase']}: {event['error']}")


def verify(store):
    """Print hierarchy totals and any orphaned or duplicated rows."""
    print(f'\n{"=" * 60}')
    print('VERIFICATION')
    print(f'{"=" * 60}')

    c = store.run_sql("""
        SELECT
            (SELECT COUNT(*) FROM states) AS states,
            (SELECT COUNT(*) FROM lgas) AS lgas,
            (SELECT COUNT(*) FROM wards) AS wards,
            (SELECT COUNT(*) FROM polling_units) AS pus,
            (SELECT COUNT(*) FROM lgas WHERE code LIKE 'LGA-NEW-%') AS synthetic_lgas,
            (SELECT COUNT(*) FROM wards WHERE code LIKE 'WRD-NEW-%') AS synthetic_wards,
            (SELECT COUNT(*) FROM wards WHERE lga_id NOT IN (SELECT id FROM lgas)) AS orphan_wards,
            (SELECT COUNT(*) FROM polling_units
                WHERE ward_id NOT IN (SELECT id FROM wards)) AS orphan_pus
    """)[0]
    print(f"  States: {c['states']}")
    print(f"  LGAs: {c['lgas']} ({c['synthetic_lgas']} created by import)")
    print(f"  Wards: {c['wards']} ({c['synthetic_wards']} created by import)")
    print(f"  Polling units: {c['pus']}")
    print(f"  Orphan wards: {c['orphan_wards']}")
    print(f"  Orphan polling units: {c['orphan_pus']}")

    dups = store.run_sql("""
        SELECT unit_code, COUNT(*) AS cnt FROM polling_units
        GROUP BY unit_code HAVING COUNT(*) > 1
    """)
    if dups:
        print(f'\n  WARNING: {len(dups)} duplicate unit codes!')
    else:
        print('\n  No duplicate unit codes.')
    return c


def main(argv=None):
    parser = argparse.ArgumentParser(description='Seed polling units from the INEC registry CSV')
    parser.add_argument('--input', type=str, default=INPUT_PATH, help='Registry CSV path')
    parser.add_argument('--clear-existing', action='store_true',
                        help='Delete ALL existing polling units before loading (irreversible)')
    parser.add_argument('--dry-run', action='store_true',
                        help='Parse and match only, no database changes')
    parser.add_argument('--skip-verify', action='store_true',
                        help='Skip the verification queries after loading')
    args = parser.parse_args(argv)

    if args.dry_run:
        print('DRY RUN MODE — no database changes will be made.\n')

    try:
        store = SupabaseStore()
        stats = import_file(store, args.input, clear_existing=args.clear_existing,
                            dry_run=args.dry_run, on_event=print_event)
    except Exception as e:
        print(f'Fatal error: {e}')
        sys.exit(1)

    print(f'\n{"=" * 60}')
    print('SEEDING COMPLETE' if not args.dry_run else 'DRY RUN COMPLETE')
    print(f'{"=" * 60}')
    print(f"  Total records: {stats['total_records']}")
    print(f"  Matched & inserted: {stats['matched']}")
    print(f"  Skipped: {stats['skipped']}")
    print(f"  New LGAs created: {stats['new_lgas']}")
    print(f"  New wards created: {stats['new_wards']}")
    print(f"  Total polling units in DB: {stats['total_polling_units']}")

    if not args.dry_run and not args.skip_verify:
        try:
            verify(store)
        except Exception as e:
            print(f'Fatal error: {e}')
            sys.exit(1)

    print('\nDone!')
    return stats


if __name__ == '__main__':
    main()
