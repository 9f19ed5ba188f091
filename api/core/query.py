"""
Small helper for SELECTs with optional, ANDed filters.

Each filter is kept as a (clause, value) pair. Clauses use `{}` where the
bound value goes; `build()` numbers the placeholders ($1, $2, ...) in the
order the filters were added, so SQL text and arguments never drift apart.

    qb = QueryBuilder("SELECT ... FROM products p")
    qb.where_if("p.name LIKE {}", like_pattern(name) if name else None)
    sql, args = qb.build("ORDER BY p.product_id")
"""

from __future__ import annotations

from typing import Any


def like_pattern(term: str) -> str:
    """
    `%term%` with LIKE wildcards in `term` escaped (literal substring match).
    """
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


class QueryBuilder:
    def __init__(self, base_sql: str) -> None:
        self.base_sql = base_sql.strip()
        self._filters: list[tuple[str, Any]] = []

    def where(self, clause: str, value: Any) -> QueryBuilder:
        if "{}" not in clause:
            raise ValueError(f"Filter clause has no '{{}}' placeholder: {clause!r}")
        self._filters.append((clause, value))
        return self

    def where_if(self, clause: str, value: Any) -> QueryBuilder:
        if _is_present(value):
            self.where(clause, value)
        return self

    def build(self, suffix: str = "") -> tuple[str, list[Any]]:
        parts = [self.base_sql]
        args: list[Any] = []
        clauses: list[str] = []
        for clause, value in self._filters:
            args.append(value)
            clauses.append(clause.replace("{}", f"${len(args)}"))
        if clauses:
            parts.append("WHERE " + " AND ".join(clauses))
        if suffix.strip():
            parts.append(suffix.strip())
        return "\n".join(parts), args
