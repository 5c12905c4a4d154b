"""Guarded session: plan every statement through the chain, then execute."""

from __future__ import annotations

import logging

from appendguard.adapters._base import DatabaseAdapter, ExecutionResult, Params
from appendguard.interceptor import InterceptorChain, PlannedStatement, PlanOptions
from appendguard.policy.statement import parse_statements
from appendguard.policy.tables import SearchPathResolver

logger = logging.getLogger(__name__)


class GuardedSession:
    """Stand-in for a database's query pipeline in front of an adapter.

    Statements are planned through ``chain`` before anything reaches the
    database. A rejection from any interceptor propagates out of
    ``prepare``/``execute`` and nothing in the SQL text is executed.

    ``resolver`` mirrors the database's catalog and search path; it is
    refreshed before every execution. Pass it to ``load_filter`` so the
    append-only filter resolves names against the live database.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        chain: InterceptorChain,
        *,
        dialect: str | None = None,
    ) -> None:
        self.adapter = adapter
        self.chain = chain
        self.dialect = dialect if dialect is not None else adapter.dialect()
        self.resolver = SearchPathResolver(dialect=self.dialect)

    async def refresh_resolver(self) -> None:
        search_path = await self.adapter.search_path()
        metadata = await self.adapter.introspect()
        self.resolver.update(search_path, metadata.relations())

    def prepare(
        self,
        sql: str,
        options: PlanOptions = None,
        bound_parameters: Params = None,
    ) -> list[PlannedStatement]:
        """Plan every statement in ``sql``; raises on the first rejection."""
        return [
            self.chain.plan(statement, options, bound_parameters)
            for statement in parse_statements(sql, dialect=self.dialect)
        ]

    async def execute(
        self,
        sql: str,
        bound_parameters: Params = None,
        *,
        labels: dict[str, str] | None = None,
    ) -> ExecutionResult:
        await self.refresh_resolver()
        planned = self.prepare(sql, bound_parameters=bound_parameters)
        logger.debug("executing %d planned statement(s)", len(planned))
        return await self.adapter.execute(sql, params=bound_parameters, labels=labels)
