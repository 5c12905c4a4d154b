"""appendguard: reject UPDATE and DELETE on append-only relations."""

import logging

from appendguard.errors import AppendOnlyViolation, QueryCanceled
from appendguard.interceptor import (
    AppendOnlyInterceptor,
    InterceptorChain,
    PlannedStatement,
    load_filter,
    standard_planner,
    unload_filter,
)
from appendguard.policy import Statement, Verdict, check_sql, decide, parse_statements
from appendguard.settings import PolicyStore

__all__ = [
    "AppendOnlyInterceptor",
    "AppendOnlyViolation",
    "InterceptorChain",
    "PlannedStatement",
    "PolicyStore",
    "QueryCanceled",
    "Statement",
    "Verdict",
    "check_sql",
    "decide",
    "load_filter",
    "parse_statements",
    "standard_planner",
    "unload_filter",
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
