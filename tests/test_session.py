"""End-to-end: guarded session in front of an in-memory DuckDB."""

from __future__ import annotations

import asyncio

import pytest

from appendguard.adapters._base import ConnectionConfig, DatabaseType
from appendguard.adapters.duckdb import DuckDBAdapter
from appendguard.errors import AppendOnlyViolation
from appendguard.interceptor import InterceptorChain, load_filter
from appendguard.session import GuardedSession
from appendguard.settings import PolicyStore


@pytest.fixture
def adapter():
    a = DuckDBAdapter()
    config = ConnectionConfig(name="test", db_type=DatabaseType.DUCKDB, params={"path": ":memory:"})
    asyncio.run(a.connect(config))
    asyncio.run(a.execute("CREATE SCHEMA acct"))
    asyncio.run(a.execute("CREATE TABLE acct.ledger (id INTEGER, amount INTEGER)"))
    asyncio.run(a.execute("CREATE TABLE acct.accounts (id INTEGER, balance INTEGER)"))
    asyncio.run(a.execute("CREATE TABLE main.events (id INTEGER)"))
    asyncio.run(a.execute("INSERT INTO acct.ledger VALUES (1, 100), (2, 200)"))
    asyncio.run(a.execute("INSERT INTO acct.accounts VALUES (1, 50)"))
    asyncio.run(a.execute("INSERT INTO main.events VALUES (1)"))
    yield a
    asyncio.run(a.close())


@pytest.fixture
def store():
    return PolicyStore("acct.ledger, main.events")


@pytest.fixture
def session(adapter, store):
    chain = InterceptorChain()
    s = GuardedSession(adapter, chain)
    load_filter(chain, store, resolver=s.resolver)
    return s


def _count(adapter, table: str) -> int:
    result = asyncio.run(adapter.execute(f"SELECT count(*) AS n FROM {table}"))
    return result.rows[0]["n"]


def test_select_allowed(session):
    result = asyncio.run(session.execute("SELECT id FROM acct.ledger ORDER BY id"))
    assert result.rows == [{"id": 1}, {"id": 2}]


def test_insert_allowed(session, adapter):
    asyncio.run(session.execute("INSERT INTO acct.ledger VALUES (3, 300)"))
    assert _count(adapter, "acct.ledger") == 3


def test_delete_rejected_and_nothing_deleted(session, adapter):
    with pytest.raises(AppendOnlyViolation, match=r"Relation acct\.ledger is append only!"):
        asyncio.run(session.execute("DELETE FROM acct.ledger WHERE id = 1"))
    assert _count(adapter, "acct.ledger") == 2


def test_update_rejected(session, adapter):
    with pytest.raises(AppendOnlyViolation):
        asyncio.run(session.execute("UPDATE acct.ledger SET amount = 0"))
    result = asyncio.run(adapter.execute("SELECT sum(amount) AS s FROM acct.ledger"))
    assert result.rows[0]["s"] == 300


def test_update_unprotected_allowed(session, adapter):
    asyncio.run(session.execute("UPDATE acct.accounts SET balance = 0 WHERE id = 1"))
    result = asyncio.run(adapter.execute("SELECT balance FROM acct.accounts"))
    assert result.rows == [{"balance": 0}]


def test_unqualified_name_resolved_through_search_path(session, adapter):
    with pytest.raises(AppendOnlyViolation, match="main.events"):
        asyncio.run(session.execute("DELETE FROM events"))
    assert _count(adapter, "main.events") == 1


def test_rejection_in_later_statement_blocks_whole_batch(session, adapter):
    with pytest.raises(AppendOnlyViolation):
        asyncio.run(session.execute(
            "UPDATE acct.accounts SET balance = 1; DELETE FROM acct.ledger"
        ))
    result = asyncio.run(adapter.execute("SELECT balance FROM acct.accounts"))
    assert result.rows == [{"balance": 50}]


def test_config_change_applies_to_next_statement(session, store, adapter):
    store.protected_relations = ""
    asyncio.run(session.execute("DELETE FROM acct.ledger WHERE id = 1"))
    assert _count(adapter, "acct.ledger") == 1


def test_utility_allowed(session, adapter):
    asyncio.run(session.execute("DROP TABLE acct.ledger"))
    meta = asyncio.run(adapter.introspect())
    assert ("acct", "ledger") not in meta.relations()


def test_prepare_plans_every_statement(session):
    planned = session.prepare("SELECT 1; INSERT INTO acct.ledger VALUES (9, 9)")
    assert len(planned) == 2
    assert all("append_only_filter" in p.planned_by for p in planned)


def test_mixed_case_table_protected(adapter):
    asyncio.run(adapter.execute('CREATE TABLE main."Ledger" (id INTEGER)'))
    asyncio.run(adapter.execute('INSERT INTO main."Ledger" VALUES (1)'))
    chain = InterceptorChain()
    s = GuardedSession(adapter, chain)
    load_filter(chain, PolicyStore("main.Ledger"), resolver=s.resolver)

    with pytest.raises(AppendOnlyViolation, match=r"Relation main\.Ledger is append only!"):
        asyncio.run(s.execute("DELETE FROM main.Ledger"))
    with pytest.raises(AppendOnlyViolation):
        asyncio.run(s.execute("DELETE FROM ledger"))
    assert _count(adapter, "main.Ledger") == 1
