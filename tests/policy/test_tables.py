"""Test target extraction and schema resolution."""

import sqlglot

from appendguard.policy._types import RelationName
from appendguard.policy.tables import SearchPathResolver, target_table


def _target(sql: str, dialect: str | None = "postgres"):
    return target_table(sqlglot.parse_one(sql, dialect=dialect))


def test_delete_target():
    table = _target("DELETE FROM public.ledger WHERE id = 1")
    assert table is not None
    assert (table.db, table.name) == ("public", "ledger")


def test_update_target():
    table = _target("UPDATE public.accounts SET balance = 0")
    assert (table.db, table.name) == ("public", "accounts")


def test_update_target_not_from_source():
    table = _target("UPDATE public.accounts SET x = s.x FROM public.ledger AS s WHERE s.id = 1")
    assert table.name == "accounts"


def test_merge_target():
    table = _target(
        "MERGE INTO public.ledger AS t USING staging AS s ON t.id = s.id "
        "WHEN MATCHED THEN UPDATE SET amount = s.amount"
    )
    assert (table.db, table.name) == ("public", "ledger")


def test_no_target_for_select_and_insert():
    assert _target("SELECT * FROM public.ledger") is None
    assert _target("INSERT INTO public.ledger VALUES (1)") is None


def test_no_target_for_unparsed():
    assert target_table(None) is None


class TestSearchPathResolver:
    def _resolve(self, resolver: SearchPathResolver, sql: str):
        return resolver.resolve(_target(sql))

    def test_qualified_without_catalog(self):
        resolved = self._resolve(SearchPathResolver(), "DELETE FROM public.ledger")
        assert resolved == RelationName("public", "ledger")
        assert resolved.qualified == "public.ledger"

    def test_unqualified_without_search_path_is_unresolved(self):
        assert self._resolve(SearchPathResolver(), "DELETE FROM ledger") is None

    def test_unqualified_uses_first_search_path_schema(self):
        resolver = SearchPathResolver(search_path=["app", "public"])
        assert self._resolve(resolver, "DELETE FROM ledger") == RelationName("app", "ledger")

    def test_unqualified_uses_catalog(self):
        resolver = SearchPathResolver(
            search_path=["app", "public"],
            catalog={("public", "ledger"), ("app", "users")},
        )
        assert self._resolve(resolver, "DELETE FROM ledger") == RelationName("public", "ledger")

    def test_dropped_relation_is_unresolved(self):
        resolver = SearchPathResolver(search_path=["public"], catalog={("public", "accounts")})
        assert self._resolve(resolver, "DELETE FROM public.ledger") is None
        assert self._resolve(resolver, "DELETE FROM ledger") is None

    def test_unquoted_identifiers_fold_to_lowercase(self):
        resolved = self._resolve(SearchPathResolver(dialect="postgres"), "DELETE FROM Public.Ledger")
        assert resolved.qualified == "public.ledger"

    def test_quoted_identifiers_keep_case(self):
        resolved = self._resolve(
            SearchPathResolver(dialect="postgres"), 'DELETE FROM "Public"."Ledger"'
        )
        assert resolved.qualified == "Public.Ledger"

    def test_update_replaces_view(self):
        resolver = SearchPathResolver(search_path=["public"], catalog=set())
        assert self._resolve(resolver, "DELETE FROM ledger") is None
        resolver.update(["public"], {("public", "ledger")})
        assert self._resolve(resolver, "DELETE FROM ledger") == RelationName("public", "ledger")

    def test_case_insensitive_dialect_returns_catalog_spelling(self):
        resolver = SearchPathResolver(
            search_path=["main"], catalog={("main", "Ledger")}, dialect="duckdb"
        )
        expected = RelationName("main", "Ledger")
        assert self._resolve(resolver, "DELETE FROM main.Ledger") == expected
        assert self._resolve(resolver, "DELETE FROM LEDGER") == expected
        assert self._resolve(resolver, 'DELETE FROM "ledger"') == expected

    def test_case_sensitive_dialect_needs_exact_catalog_entry(self):
        resolver = SearchPathResolver(
            search_path=["public"], catalog={("public", "Ledger")}, dialect="postgres"
        )
        assert self._resolve(resolver, "DELETE FROM Ledger") is None
        assert self._resolve(resolver, 'DELETE FROM "Ledger"') == RelationName("public", "Ledger")
