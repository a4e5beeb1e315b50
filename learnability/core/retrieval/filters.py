"""
Typed filter expressions over vector index metadata.

Filters are built from Eq / In / And / Or nodes and rendered into Milvus
boolean expressions. Values are always emitted as escaped string literals
and field names are checked against the filterable tags, so user input
never reaches the expression as raw syntax.

Dependencies: json (stdlib)
System role: Query scope composition for retrieval and deletes
"""

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Union

FILTERABLE_FIELDS = frozenset({"tenant_id", "subject_id", "document_id"})


def _literal(value: Any) -> str:
    return json.dumps(str(value))


def _check_field(field: str) -> None:
    if field not in FILTERABLE_FIELDS:
        raise ValueError(f"Field is not filterable: {field}")


@dataclass(frozen=True)
class Eq:
    """field == value"""

    field: str
    value: str

    def __post_init__(self) -> None:
        _check_field(self.field)

    def to_expr(self) -> str:
        return f"{self.field} == {_literal(self.value)}"

    def matches(self, record: Mapping[str, Any]) -> bool:
        return record.get(self.field) == str(self.value)


@dataclass(frozen=True)
class In:
    """field in [values]"""

    field: str
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_field(self.field)
        if not self.values:
            raise ValueError(f"In filter on {self.field} needs at least one value")

    def to_expr(self) -> str:
        return f"{self.field} in [{', '.join(_literal(v) for v in self.values)}]"

    def matches(self, record: Mapping[str, Any]) -> bool:
        return record.get(self.field) in {str(v) for v in self.values}


@dataclass(frozen=True)
class And:
    clauses: tuple["Filter", ...]

    def to_expr(self) -> str:
        return " and ".join(f"({clause.to_expr()})" for clause in self.clauses)

    def matches(self, record: Mapping[str, Any]) -> bool:
        return all(clause.matches(record) for clause in self.clauses)


@dataclass(frozen=True)
class Or:
    clauses: tuple["Filter", ...]

    def to_expr(self) -> str:
        return " or ".join(f"({clause.to_expr()})" for clause in self.clauses)

    def matches(self, record: Mapping[str, Any]) -> bool:
        return any(clause.matches(record) for clause in self.clauses)


Filter = Union[Eq, In, And, Or]


def all_of(*clauses: Filter) -> Filter:
    """AND the clauses together, collapsing a single clause."""
    if len(clauses) == 1:
        return clauses[0]
    return And(tuple(clauses))


def one_of(field: str, values: Iterable[str]) -> In:
    """Build an In node from any iterable, keeping first-seen order."""
    return In(field, tuple(dict.fromkeys(str(v) for v in values)))


@dataclass(frozen=True)
class QueryScope:
    """
    Request-scoped search scope.

    The tenant is always part of the filter. When document IDs are known they
    form the primary filter and the subject becomes the fallback; otherwise
    the subject (if any) is the primary filter and there is no fallback.
    """

    tenant_id: str
    subject_id: str | None = None
    document_ids: tuple[str, ...] = ()

    def primary_filter(self) -> Filter:
        tenant = Eq("tenant_id", self.tenant_id)
        if self.document_ids:
            return all_of(tenant, one_of("document_id", self.document_ids))
        if self.subject_id:
            return all_of(tenant, Eq("subject_id", self.subject_id))
        return tenant

    def fallback_filter(self) -> Filter | None:
        if self.document_ids and self.subject_id:
            return all_of(Eq("tenant_id", self.tenant_id), Eq("subject_id", self.subject_id))
        return None
