"""
Reading the polling-unit registry CSV.

Columns: unit name, ward, LGA, state, then optionally latitude and longitude.
The first line is a header. Quoted fields may contain commas; a doubled quote
inside a quoted field is not unescaped.
"""
from collections import namedtuple

from pu_import.names import canonicalize, state_key

RawImportRow = namedtuple(
    'RawImportRow',
    ['position', 'name', 'ward_name', 'lga_name', 'state_name', 'lat', 'lng'],
    defaults=(None, None),
)


def parse_line(line, sep=','):
    fields = []
    field = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == sep and not in_quotes:
            fields.append(''.join(field).strip())
            field = []
        else:
            field.append(ch)
    fields.append(''.join(field).strip())
    return fields


def to_row(fields, position):
    """
    Build a RawImportRow from split fields, or None when the row can't be used.

    A row needs the four name columns. The unit name must be non-blank; ward,
    LGA and state must keep something after canonicalization, so a
    punctuation-only placeholder like "-" is not a usable name. Coordinates
    stay raw text here; they are checked when the polling unit is built.
    """
    if len(fields) < 4:
        return None
    name, ward_name, lga_name, state_name = fields[:4]
    if not (name and canonicalize(ward_name) and canonicalize(lga_name) and state_key(state_name)):
        return None
    lat = fields[4] if len(fields) > 4 and fields[4] else None
    lng = fields[5] if len(fields) > 5 and fields[5] else None
    return RawImportRow(position, name, ward_name, lga_name, state_name, lat, lng)


def split_lines(text):
    """
    Data lines of the file: header dropped, blank lines removed.

    Only a line feed ends a line. Other line breaks (NEL, U+2028, a lone
    carriage return) can occur inside a field and must not shift the
    positions of later rows. A trailing carriage return is trimmed with the
    last field.
    """
    lines = text.split('\n')[1:]
    return [l for l in lines if l.strip()]


def read_lines(path):
    with open(path, encoding='utf-8', newline='') as f:
        return split_lines(f.read())


def parse_rows(lines):
    """
    Yield (position, row) for every data line; row is None for unusable lines.

    Positions are 1-based over the data lines, so they stay tied to the
    source file no matter how many rows get skipped.
    """
    for i, line in enumerate(lines, start=1):
        yield i, to_row(parse_line(line), i)
