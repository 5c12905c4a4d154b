"""Parse the comma-separated protected-relation setting."""

from __future__ import annotations


def parse_relation_list(raw: str | None) -> frozenset[str]:
    """Split a ``schema.table, schema.table`` string into a set of entries.

    Tokens are trimmed and empty tokens dropped; order and duplicates do
    not matter. Nothing else is normalized: case and quoting are kept.
    """
    if not raw:
        return frozenset()
    return frozenset(token.strip() for token in raw.split(",") if token.strip())


def is_protected(qualified_name: str, raw: str | None) -> bool:
    """Exact, case-sensitive membership test against the raw setting."""
    return qualified_name in parse_relation_list(raw)
