import pytest

from pu_import import store as store_mod
from pu_import.store import SqlError, SupabaseStore, esc, sql_val


class FakeResponse:
    def __init__(self, status_code, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload


@pytest.fixture
def api(monkeypatch):
    """Queue of responses for httpx.post; records the queries sent."""
    calls = []
    responses = []

    def fake_post(url, headers=None, json=None, timeout=None):
        calls.append({'url': url, 'headers': headers, 'query': json['query']})
        return responses.pop(0)

    monkeypatch.setattr(store_mod.httpx, 'post', fake_post)
    monkeypatch.setattr(store_mod.time, 'sleep', lambda s: None)
    return calls, responses


def make_store():
    return SupabaseStore(token='sbp_test', project_ref='abc123')


def test_esc_and_sql_val():
    assert esc("Ohaji/Egbema's") == "Ohaji/Egbema''s"
    assert sql_val(None) == 'NULL'
    assert sql_val(6.5) == '6.5'
    assert sql_val(True) == 'true'
    assert sql_val("Oke'Ira") == "'Oke''Ira'"


def test_insert_ignore_renders_conflict_skip(api):
    calls, responses = api
    responses.append(FakeResponse(201, [{'id': 'x'}]))
    written = make_store().insert_ignore('polling_units', [
        {'name': "St. Mary's", 'unit_code': 'PU-000001', 'ward_id': 'w1',
         'latitude': 6.5, 'longitude': None},
    ])
    assert written == 1
    q = calls[0]['query']
    assert q.startswith('INSERT INTO polling_units (name, unit_code, ward_id, latitude, longitude) VALUES')
    assert "('St. Mary''s', 'PU-000001', 'w1', 6.5, NULL)" in q
    assert 'ON CONFLICT DO NOTHING' in q
    assert calls[0]['url'] == 'https://api.supabase.com/v1/projects/abc123/database/query'
    assert calls[0]['headers']['Authorization'] == 'Bearer sbp_test'


def test_insert_ignore_empty_is_a_no_op(api):
    calls, _ = api
    assert make_store().insert_ignore('wards', []) == 0
    assert calls == []


def test_count_and_delete(api):
    calls, responses = api
    responses.extend([FakeResponse(201, [{'cnt': '42'}]), FakeResponse(201, [])])
    s = make_store()
    assert s.count('polling_units') == 42
    s.delete_all('polling_units')
    assert calls[1]['query'] == 'DELETE FROM polling_units'


def test_select_all_uses_table_columns(api):
    calls, responses = api
    responses.append(FakeResponse(201, [{'id': 'a', 'name': 'Ikeja', 'code': 'X', 'state_id': 's'}]))
    rows = make_store().select_all('lgas')
    assert rows[0]['name'] == 'Ikeja'
    assert calls[0]['query'] == 'SELECT id, name, code, state_id FROM lgas'


def test_unknown_table_is_refused(api):
    with pytest.raises(ValueError):
        make_store().delete_all('members')


def test_rate_limit_is_retried(api):
    calls, responses = api
    responses.extend([FakeResponse(429, text='slow down'), FakeResponse(201, [{'cnt': 1}])])
    assert make_store().count('states') == 1
    assert len(calls) == 2


def test_api_error_raises(api):
    _, responses = api
    responses.append(FakeResponse(400, text='ERROR: relation "lgas" does not exist'))
    with pytest.raises(SqlError) as exc:
        make_store().select_all('lgas')
    assert exc.value.status_code == 400


def test_rate_limit_gives_up_after_max_retries(api):
    calls, responses = api
    responses.extend([FakeResponse(429, text='slow down')] * 5)
    with pytest.raises(SqlError) as exc:
        make_store().count('states')
    assert exc.value.status_code == 429
    assert len(calls) == 5


def test_missing_token_is_reported():
    with pytest.raises(RuntimeError):
        SupabaseStore(token='', project_ref='abc123')
