"""
Name canonicalization for matching registry names against the database.

Matching is exact on the canonical key only: case, spacing and punctuation
are ignored, nothing else is.
"""
import re

_NON_ALNUM = re.compile(r'[^A-Z0-9]')

# The registry and the states table spell the capital territory several ways.
FCT_KEY = 'FEDERALCAPITALTERRITORY'
STATE_ALIASES = {
    'ABUJAFCT': FCT_KEY,
    'FCTABUJA': FCT_KEY,
    'FCT': FCT_KEY,
    'ABUJA': FCT_KEY,
}


def canonicalize(s):
    """'Ward  7, Kano' -> 'WARD7KANO'"""
    if not s:
        return ''
    return _NON_ALNUM.sub('', s.upper())


def state_key(name):
    """Canonical key for a state name, with capital-territory aliases folded."""
    key = canonicalize(name)
    return STATE_ALIASES.get(key, key)
