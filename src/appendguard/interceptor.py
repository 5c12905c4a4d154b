"""Statement interceptors: a planner chain with the append-only filter in it.

Every statement is planned by calling the head of an InterceptorChain. An
interceptor always forwards to the planner it was installed on top of (or to
``standard_planner``) first, then applies its own check to the statement.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from appendguard.errors import AppendOnlyViolation
from appendguard.policy import decide
from appendguard.policy._types import Verdict
from appendguard.policy.statement import Statement
from appendguard.policy.tables import RelationResolver
from appendguard.settings import PolicyStore

logger = logging.getLogger(__name__)

PlanOptions = Mapping[str, Any] | None
BoundParameters = Sequence[Any] | Mapping[str, Any] | None


@dataclass
class PlannedStatement:
    """What the planner chain hands back for execution."""

    statement: Statement
    options: PlanOptions = None
    bound_parameters: BoundParameters = None
    planned_by: list[str] = field(default_factory=list)


class Planner(Protocol):
    def __call__(
        self,
        statement: Statement,
        options: PlanOptions,
        bound_parameters: BoundParameters,
    ) -> PlannedStatement: ...


def standard_planner(
    statement: Statement,
    options: PlanOptions = None,
    bound_parameters: BoundParameters = None,
) -> PlannedStatement:
    """The default planner: wraps the statement for execution as-is."""
    return PlannedStatement(
        statement=statement,
        options=options,
        bound_parameters=bound_parameters,
        planned_by=["standard_planner"],
    )


class AppendOnlyInterceptor:
    """Reject UPDATE/DELETE/MERGE on relations listed in the policy store."""

    name = "append_only_filter"

    def __init__(
        self,
        store: PolicyStore,
        next_planner: Planner | None = None,
        resolver: RelationResolver | None = None,
    ) -> None:
        self.store = store
        self.next_planner = next_planner
        self.resolver = resolver

    def consult(self, statement: Statement) -> Verdict:
        verdict = decide(statement, self.store.protected_relations, self.resolver)
        logger.debug("%s %s: %s", statement.kind.value, statement.sql, verdict)
        return verdict

    def __call__(
        self,
        statement: Statement,
        options: PlanOptions = None,
        bound_parameters: BoundParameters = None,
    ) -> PlannedStatement:
        planner = self.next_planner or standard_planner
        result = planner(statement, options, bound_parameters)

        verdict = self.consult(statement)
        if not verdict.allowed:
            logger.warning("rejected %s: %s", statement.kind.value, verdict.message)
            raise AppendOnlyViolation(verdict.relation)

        result.planned_by.append(self.name)
        return result


class InterceptorChain:
    """Ordered stack of installed planners; the last installed runs first."""

    def __init__(self) -> None:
        self._installed: list[Planner] = []

    @property
    def installed(self) -> list[Planner]:
        return list(self._installed)

    @property
    def head(self) -> Planner:
        return self._installed[-1] if self._installed else standard_planner

    def install(self, factory: Callable[[Planner | None], Planner]) -> Planner:
        """Build an interceptor on top of the current head and make it the head.

        ``factory`` receives the previously installed planner, or None when
        the chain is empty (the interceptor then falls back to
        ``standard_planner``).
        """
        previous = self._installed[-1] if self._installed else None
        interceptor = factory(previous)
        self._installed.append(interceptor)
        return interceptor

    def uninstall(self, interceptor: Planner) -> None:
        """Remove the head, restoring the planner it was installed over."""
        if not self._installed or self._installed[-1] is not interceptor:
            raise ValueError("only the most recently installed interceptor can be uninstalled")
        self._installed.pop()

    def plan(
        self,
        statement: Statement,
        options: PlanOptions = None,
        bound_parameters: BoundParameters = None,
    ) -> PlannedStatement:
        return self.head(statement, options, bound_parameters)


def load_filter(
    chain: InterceptorChain,
    store: PolicyStore,
    resolver: RelationResolver | None = None,
) -> AppendOnlyInterceptor:
    """Install the append-only filter on ``chain`` and mark the store active."""
    interceptor = chain.install(
        lambda previous: AppendOnlyInterceptor(store, next_planner=previous, resolver=resolver)
    )
    store.mark_loaded(True)
    logger.info("append-only filter installed")
    return interceptor


def unload_filter(
    chain: InterceptorChain,
    interceptor: AppendOnlyInterceptor,
) -> None:
    """Uninstall the filter and reset its store's module_loaded flag."""
    chain.uninstall(interceptor)
    interceptor.store.mark_loaded(False)
    logger.info("append-only filter uninstalled")
