"""Polling-unit codes and coordinate checks."""
import re

# Rough bounding box around Nigeria.
LAT_RANGE = (3.0, 15.0)
LNG_RANGE = (2.0, 15.0)

_DECIMAL = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def unit_code(position):
    """PU code from the row's 1-based position in the registry: 7 -> 'PU-000007'."""
    return f'PU-{position:06d}'


def parse_coord(text):
    """
    Plain decimal number, or None.

    Strict: the whole (trimmed) field must be a decimal such as '6.45',
    '-0.5' or '1e1'. Values with units or hemisphere letters ('6.5°', '6.5N'),
    digit separators ('6_5'), 'nan' and 'inf' are all treated as missing.
    """
    if text is None:
        return None
    text = text.strip()
    if not _DECIMAL.fullmatch(text):
        return None
    return float(text)


def gate_coordinates(lat, lng):
    """(lat, lng) as floats if both are usable, else (None, None)."""
    lat = parse_coord(lat)
    lng = parse_coord(lng)
    if lat is None or lng is None:
        return None, None
    if not (LAT_RANGE[0] <= lat <= LAT_RANGE[1] and LNG_RANGE[0] <= lng <= LNG_RANGE[1]):
        return None, None
    return lat, lng


def build_polling_unit(row, ward_id):
    lat, lng = gate_coordinates(row.lat, row.lng)
    return {
        'name': row.name,
        'unit_code': unit_code(row.position),
        'ward_id': ward_id,
        'latitude': lat,
        'longitude': lng,
    }
