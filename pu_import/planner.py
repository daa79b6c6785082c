"""
First pass over the registry: find the LGAs and wards that must be created.

Every row whose state resolves is walked down the hierarchy. A missing LGA or
ward gets a fresh id and a synthetic code and is registered in the index at
once, so each (parent, canonical name) pair is created at most once per run.
"""
import uuid
from collections import Counter

from pu_import.names import state_key

LGA_CODE_PREFIX = 'LGA-NEW-'
WARD_CODE_PREFIX = 'WRD-NEW-'


def new_id():
    return str(uuid.uuid4())


class HierarchyPlan:
    def __init__(self):
        self.lgas = []
        self.wards = []
        self.unresolved_states = Counter()  # state key → rows


class ReconciliationPlanner:
    def __init__(self, index, id_factory=new_id):
        self.index = index
        self.id_factory = id_factory
        self.lga_counter = 0
        self.ward_counter = 0

    def _new_lga(self, plan, state_id, name):
        self.lga_counter += 1
        lga = {
            'id': self.id_factory(),
            'name': name,
            'code': f'{LGA_CODE_PREFIX}{self.lga_counter}',
            'state_id': state_id,
        }
        self.index.add_lga(state_id, name, lga['id'])
        plan.lgas.append(lga)
        return lga['id']

    def _new_ward(self, plan, lga_id, name):
        self.ward_counter += 1
        ward = {
            'id': self.id_factory(),
            'name': name,
            'code': f'{WARD_CODE_PREFIX}{self.ward_counter}',
            'lga_id': lga_id,
        }
        self.index.add_ward(lga_id, name, ward['id'])
        plan.wards.append(ward)
        return ward['id']

    def plan(self, rows):
        """Walk the parsed rows (None entries are skipped) and build the plan."""
        plan = HierarchyPlan()
        for row in rows:
            if row is None:
                continue

            state_id = self.index.state_id(row.state_name)
            if state_id is None:
                plan.unresolved_states[state_key(row.state_name)] += 1
                continue

            lga_id = self.index.lga_id(state_id, row.lga_name)
            if lga_id is None:
                lga_id = self._new_lga(plan, state_id, row.lga_name)

            if self.index.ward_id(lga_id, row.ward_name) is None:
                self._new_ward(plan, lga_id, row.ward_name)

        return plan
