"""Target-relation extraction and schema resolution."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from typing import Protocol, runtime_checkable

from sqlglot import exp
from sqlglot.dialects.dialect import Dialect, NormalizationStrategy
from sqlglot.optimizer.normalize_identifiers import normalize_identifiers

from appendguard.policy._types import RelationName

_TARGET_TYPES = (exp.Update, exp.Delete, exp.Merge)


def target_table(statement: exp.Expression | None) -> exp.Table | None:
    """Return the relation an UPDATE/DELETE/MERGE writes to, if it names one."""
    if not isinstance(statement, _TARGET_TYPES):
        return None
    target = statement.this
    if isinstance(target, exp.Table) and target.name:
        return target
    return None


@runtime_checkable
class RelationResolver(Protocol):
    def resolve(self, table: exp.Table) -> RelationName | None: ...


class SearchPathResolver:
    """Resolve table references the way the host catalog would.

    Identifiers are normalized with the dialect's rules first (unquoted
    names case-folded, quoted names kept verbatim). A schema-qualified
    reference resolves to itself; an unqualified one to the first schema on
    the search path that holds the table.

    With ``catalog=None`` nothing is known about existing relations: any
    qualified name is accepted and unqualified names land in the first
    search-path schema. With a catalog, a relation missing from it (dropped
    concurrently, never existed) is unresolved, and a resolved name is
    spelled exactly as the catalog stores it. Case-insensitive dialects
    such as DuckDB match catalog entries regardless of case.
    """

    def __init__(
        self,
        search_path: Sequence[str] = (),
        catalog: Collection[tuple[str, str]] | None = None,
        dialect: str | None = None,
    ) -> None:
        self.dialect = dialect
        self._case_insensitive = (
            Dialect.get_or_raise(dialect).normalization_strategy
            is NormalizationStrategy.CASE_INSENSITIVE
        )
        self.update(search_path, catalog)

    def update(
        self,
        search_path: Sequence[str],
        catalog: Collection[tuple[str, str]] | None,
    ) -> None:
        """Replace the search path and catalog with a fresh view of the database."""
        self.search_path = list(search_path)
        self.catalog = frozenset(catalog) if catalog is not None else None
        self._folded: dict[tuple[str, str], tuple[str, str]] = {}
        if self.catalog is not None and self._case_insensitive:
            for schema, name in sorted(self.catalog):
                self._folded.setdefault((schema.casefold(), name.casefold()), (schema, name))

    def _lookup(self, schema: str, name: str) -> RelationName | None:
        if self.catalog is None:
            return RelationName(schema=schema, name=name)
        if (schema, name) in self.catalog:
            return RelationName(schema=schema, name=name)
        if self._case_insensitive:
            entry = self._folded.get((schema.casefold(), name.casefold()))
            if entry is not None:
                return RelationName(schema=entry[0], name=entry[1])
        return None

    def resolve(self, table: exp.Table) -> RelationName | None:
        normalized = normalize_identifiers(table.copy(), dialect=self.dialect)
        name = normalized.name
        schema = normalized.db
        if not name:
            return None

        if schema:
            return self._lookup(schema, name)

        for candidate in self.search_path:
            found = self._lookup(candidate, name)
            if found is not None:
                return found
        return None
