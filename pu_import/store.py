"""
Database access for the polling-unit import.

The import only needs four primitives from the database: select every row of
a table, insert rows skipping conflicts, delete every row of a table, and
count rows. ``SupabaseStore`` provides them over the Supabase Management API
SQL endpoint; tests substitute an in-memory store with the same methods.
"""
import time

import httpx

# Columns written by the import, per table. States are read-only here.
TABLE_COLUMNS = {
    'states': ('id', 'name'),
    'lgas': ('id', 'name', 'code', 'state_id'),
    'wards': ('id', 'name', 'code', 'lga_id'),
    'polling_units': ('name', 'unit_code', 'ward_id', 'latitude', 'longitude'),
}


class SqlError(RuntimeError):
    """The Management API rejected a query."""

    def __init__(self, status_code, body):
        super().__init__(f'SQL ERROR ({status_code}): {body[:500]}')
        self.status_code = status_code
        self.body = body


def esc(s):
    """Escape single quotes for SQL."""
    if s is None:
        return None
    return str(s).replace("'", "''")


def sql_val(v):
    """Convert Python value to SQL literal."""
    if v is None:
        return 'NULL'
    if isinstance(v, bool):
        return 'true' if v else 'false'
    if isinstance(v, (int, float)):
        return str(v)
    return f"'{esc(v)}'"


def _check_table(table):
    if table not in TABLE_COLUMNS:
        raise ValueError(f'Unknown table: {table}')
    return TABLE_COLUMNS[table]


class SupabaseStore:
    """Runs the import's queries through the Supabase Management API."""

    def __init__(self, token=None, project_ref=None, timeout=120, max_retries=5):
        if token is None or project_ref is None:
            import db_config
            token = token or db_config.TOKEN
            project_ref = project_ref or db_config.PROJECT_REF
        if not token:
            raise RuntimeError('SUPABASE_MANAGEMENT_TOKEN not found — check .env file.')
        if not project_ref:
            raise RuntimeError('SUPABASE_PROJECT_REF not found — check .env file.')
        self.token = token
        self.api_url = f'https://api.supabase.com/v1/projects/{project_ref}/database/query'
        self.timeout = timeout
        self.max_retries = max_retries

    def run_sql(self, query):
        """Execute SQL via Management API, retrying when rate limited."""
        for attempt in range(self.max_retries):
            resp = httpx.post(
                self.api_url,
                headers={'Authorization': f'Bearer {self.token}', 'Content-Type': 'application/json'},
                json={'query': query},
                timeout=self.timeout,
            )
            if resp.status_code == 201:
                return resp.json()
            if resp.status_code == 429 and attempt < self.max_retries - 1:
                wait = 5 * (attempt + 1)
                print(f'    Rate limited, waiting {wait}s...')
                time.sleep(wait)
                continue
            raise SqlError(resp.status_code, resp.text)

    def select_all(self, table):
        columns = _check_table(table)
        return self.run_sql(f"SELECT {', '.join(columns)} FROM {table}")

    def insert_ignore(self, table, rows):
        """Insert rows, silently skipping any that conflict. Returns rows written."""
        columns = _check_table(table)
        if not rows:
            return 0
        values = []
        for row in rows:
            values.append('(' + ', '.join(sql_val(row.get(c)) for c in columns) + ')')
        sql = (
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES "
            + ",\n".join(values)
            + "\nON CONFLICT DO NOTHING RETURNING id;"
        )
        result = self.run_sql(sql)
        return len(result or [])

    def delete_all(self, table):
        _check_table(table)
        self.run_sql(f"DELETE FROM {table}")

    def count(self, table):
        _check_table(table)
        result = self.run_sql(f"SELECT COUNT(*) AS cnt FROM {table}")
        return int(result[0]['cnt'])
