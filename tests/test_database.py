"""Tests for the library database layer, with a fake connection pool."""
import asyncio

import psycopg2
import pytest

from booksearch import database
from booksearch.database import Database, LocalInventoryClient, escape_like
from booksearch.errors import DatastoreUnavailable
from booksearch.models import LocalRecord


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []
    
    def execute(self, sql, params=None):
        self.executed.append((sql, params))
    
    def fetchall(self):
        return self.rows
    
    def __enter__(self):
        return self
    
    def __exit__(self, *exc):
        return False


class FakeConnection:
    def __init__(self, rows):
        self.cur = FakeCursor(rows)
        self.committed = False
    
    def cursor(self):
        return self.cur
    
    def commit(self):
        self.committed = True


class FakePool:
    rows = []
    
    def __init__(self, min_conn, max_conn, dsn):
        self.conn = FakeConnection(self.rows)
        self.returned = 0
        self.closed = False
    
    def getconn(self):
        return self.conn
    
    def putconn(self, conn):
        self.returned += 1
    
    def closeall(self):
        self.closed = True


@pytest.fixture
def fake_pool(monkeypatch):
    FakePool.rows = [(1, "The Hobbit", "J.R.R. Tolkien", 310, "http://img/hobbit.jpg")]
    monkeypatch.setattr(database.psycopg2.pool, "ThreadedConnectionPool", FakePool)
    return FakePool


def test_escape_like():
    assert escape_like("100%_off\\") == "100\\%\\_off\\\\"
    assert escape_like("tolkien") == "tolkien"


def test_search_books(fake_pool):
    with Database("postgresql://test") as db:
        records = db.search_books("tolk")
        pool = db.connection_pool
    
    assert records == [LocalRecord(1, "The Hobbit", "J.R.R. Tolkien", 310, "http://img/hobbit.jpg")]
    sql, params = pool.conn.cur.executed[0]
    assert "ILIKE" in sql
    assert params == ("%tolk%", "%tolk%", 10)
    assert pool.returned == 1
    assert pool.closed


def test_init_schema_commits(fake_pool):
    db = Database("postgresql://test")
    db.init_schema()
    
    assert db.connection_pool.conn.committed
    assert "CREATE TABLE IF NOT EXISTS books" in db.connection_pool.conn.cur.executed[0][0]


class BrokenDatabase:
    def search_books(self, query):
        raise psycopg2.OperationalError("connection refused")


class ListDatabase:
    def __init__(self, records):
        self.records = records
    
    def search_books(self, query):
        return [r for r in self.records if query.lower() in r.title.lower()]


def test_local_inventory_search():
    hobbit = LocalRecord(1, "The Hobbit", "Tolkien", 310, "http://img")
    client = LocalInventoryClient(ListDatabase([hobbit]))
    
    assert asyncio.run(client.search("HOBBIT")) == [hobbit]


def test_local_inventory_wraps_database_errors():
    client = LocalInventoryClient(BrokenDatabase())
    
    with pytest.raises(DatastoreUnavailable) as excinfo:
        asyncio.run(client.search("anything"))
    
    assert excinfo.value.kind == "DatastoreUnavailable"


def test_concurrent_searches_share_threaded_pool(fake_pool):
    db = Database("postgresql://test")
    client = LocalInventoryClient(db)
    
    async def go():
        return await asyncio.gather(client.search("hobbit"), client.search("tolkien"))
    
    first, second = asyncio.run(go())
    
    assert first == second == [LocalRecord(1, "The Hobbit", "J.R.R. Tolkien", 310, "http://img/hobbit.jpg")]
    assert db.connection_pool.returned == 2
