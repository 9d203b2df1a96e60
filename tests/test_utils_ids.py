from rpcstack.utils import ids


def test_get_unique_id_increments():
    first = ids.get_unique_id()
    second = ids.get_unique_id()
    assert second == (first + 1) % ids.MAX_ID


def test_get_unique_id_wraps_at_max(monkeypatch):
    monkeypatch.setattr(ids, "_counter", ids.MAX_ID - 1)
    assert ids.get_unique_id() == 0
    assert ids.get_unique_id() == 1
