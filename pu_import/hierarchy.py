"""In-memory state → LGA → ward lookup keyed by canonical names."""
from pu_import.names import canonicalize, state_key


class HierarchyIndex:
    """
    Canonical-name lookups over the three hierarchy levels.

    Seeded once from the database, then updated as the planner creates LGAs
    and wards, so later rows in the same run find what earlier rows created.
    """

    def __init__(self):
        self.states = {}         # state key → state id
        self.lgas_by_state = {}  # state id → {lga key → lga id}
        self.wards_by_lga = {}   # lga id → {ward key → ward id}
        self.duplicate_states = []  # state names shadowed by an earlier row with the same key

    @classmethod
    def from_store(cls, store):
        index = cls()
        for s in store.select_all('states'):
            key = state_key(s['name'])
            # first row wins when two spellings fold to one key (FCT aliases)
            if key in index.states:
                index.duplicate_states.append(s['name'])
                continue
            index.states[key] = s['id']
        for l in store.select_all('lgas'):
            index.add_lga(l['state_id'], l['name'], l['id'])
        for w in store.select_all('wards'):
            index.add_ward(w['lga_id'], w['name'], w['id'])
        return index

    def counts(self):
        return {
            'states': len(self.states),
            'lgas': sum(len(m) for m in self.lgas_by_state.values()),
            'wards': sum(len(m) for m in self.wards_by_lga.values()),
        }

    def state_id(self, name):
        return self.states.get(state_key(name))

    def lga_id(self, state_id, name):
        return self.lgas_by_state.get(state_id, {}).get(canonicalize(name))

    def ward_id(self, lga_id, name):
        return self.wards_by_lga.get(lga_id, {}).get(canonicalize(name))

    def add_lga(self, state_id, name, lga_id):
        self.lgas_by_state.setdefault(state_id, {})[canonicalize(name)] = lga_id

    def add_ward(self, lga_id, name, ward_id):
        self.wards_by_lga.setdefault(lga_id, {})[canonicalize(name)] = ward_id

    def resolve_ward(self, row):
        """Ward id for a parsed row, or None if any level is missing."""
        state_id = self.state_id(row.state_name)
        if state_id is None:
            return None
        lga_id = self.lga_id(state_id, row.lga_name)
        if lga_id is None:
            return None
        return self.ward_id(lga_id, row.ward_name)
