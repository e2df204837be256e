from types import SimpleNamespace

from database import connection


class FakeRawCursor:
    def __init__(self, rows):
        self.rows = list(rows)
        self.executed = []
        self.description = [SimpleNamespace(name="user_id"), SimpleNamespace(name="pages_memorized")]

    def execute(self, sql, params=None):
        self.executed.append((sql, params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows


class FakeRawConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False

    def cursor(self):
        return self._cursor

    def commit(self):
        self.committed = True


class FakePool:
    def __init__(self, raw):
        self.raw = raw
        self.returned = []

    def getconn(self):
        return self.raw

    def putconn(self, conn):
        self.returned.append(conn)


def test_placeholders_are_translated_for_postgres():
    raw = FakeRawCursor([(7, 40)])
    cursor = connection.CompatCursor(raw)
    cursor.execute("SELECT user_id, pages_memorized FROM user_progress WHERE user_id = ? AND pages_memorized > ?", (7, 1))

    assert raw.executed == [
        ("SELECT user_id, pages_memorized FROM user_progress WHERE user_id = %s AND pages_memorized > %s", (7, 1)),
    ]
    row = cursor.fetchone()
    assert row["pages_memorized"] == 40
    assert row[0] == 7
    assert list(row.keys()) == ["user_id", "pages_memorized"]


def test_fetch_handles_empty_results():
    cursor = connection.CompatCursor(FakeRawCursor([]))
    cursor.execute("SELECT 1")
    assert cursor.fetchone() is None
    assert cursor.fetchall() == []


def test_postgres_connection_goes_back_to_the_pool(monkeypatch):
    raw = FakeRawConnection(FakeRawCursor([(1, 2)]))
    pool = FakePool(raw)
    monkeypatch.setattr(connection, "_get_or_create_postgres_pool", lambda: pool)

    conn = connection._get_postgres_connection()
    conn.cursor().execute("SELECT ?", (1,))
    conn.commit()
    conn.close()

    assert raw.committed
    assert pool.returned == [raw]
