"""
Metric source interfaces.

The monitor reads from a database-stats provider and a cache-stats provider.
Neither is owned by perfwatch; any object with the accessors below works.
Accessors may return the typed records defined here, plain mappings with
camelCase or snake_case keys, or objects exposing matching attributes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Protocol, Type, TypeVar, runtime_checkable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import CollaboratorError

RecordT = TypeVar("RecordT", bound=BaseModel)


class QueryStats(BaseModel):
    """Statistics for one query shape."""

    count: int = Field(default=0, ge=0, description="Number of executions")
    average_time: float = Field(
        default=0.0,
        ge=0,
        validation_alias=AliasChoices("average_time", "averageTime", "avgTime", "avg_time"),
        description="Average execution time (ms)",
    )
    error_count: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("error_count", "errorCount", "errors"),
        description="Failed executions",
    )

    model_config = ConfigDict(frozen=True)


class DatabasePoolMetrics(BaseModel):
    """Connection pool counters."""

    active_connections: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("active_connections", "activeConnections"),
    )
    total_connections: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("total_connections", "totalConnections"),
    )

    model_config = ConfigDict(frozen=True)


class CacheStats(BaseModel):
    """Cache counters as reported by the cache layer."""

    hit_rate: float = Field(default=0.0, validation_alias=AliasChoices("hit_rate", "hitRate"))
    miss_rate: float = Field(default=0.0, validation_alias=AliasChoices("miss_rate", "missRate"))
    eviction_rate: float = Field(
        default=0.0,
        validation_alias=AliasChoices("eviction_rate", "evictionRate"),
    )
    memory_usage: float = Field(
        default=0.0,
        validation_alias=AliasChoices("memory_usage", "memoryUsage"),
    )

    model_config = ConfigDict(frozen=True)


@runtime_checkable
class DatabaseStatsProvider(Protocol):
    """Read-only accessors exposed by the database layer."""

    def get_metrics(self) -> Any:
        """Return ``{activeConnections, totalConnections}``."""
        ...

    def get_query_stats(self) -> Mapping:
        """Return a mapping of query id to ``{count, averageTime, errorCount}``."""
        ...


@runtime_checkable
class CacheStatsProvider(Protocol):
    """Read-only accessor exposed by the cache layer."""

    def get_metrics(self) -> Any:
        """Return ``{hitRate, missRate, evictionRate, memoryUsage}``."""
        ...


def coerce_record(record_type: Type[RecordT], value: Any, *, collaborator: str, accessor: str) -> RecordT:
    """
    Validate a collaborator result into a typed record.

    Args:
        record_type: Target record model
        value: Record instance, mapping or attribute object
        collaborator: Source name used in error context
        accessor: Accessor name used in error context

    Returns:
        Validated record

    Raises:
        CollaboratorError: If the value cannot be validated
    """
    if isinstance(value, record_type):
        return value

    try:
        if isinstance(value, Mapping):
            return record_type.model_validate(dict(value))
        return record_type.model_validate(value, from_attributes=True)
    except PydanticValidationError as e:
        raise CollaboratorError(
            f"Malformed {record_type.__name__} from {collaborator}.{accessor}",
            collaborator=collaborator,
            accessor=accessor,
            cause=e,
        ) from e


def coerce_query_stats(value: Any) -> Dict[str, QueryStats]:
    """Validate the result of ``get_query_stats()``."""
    if not isinstance(value, Mapping):
        raise CollaboratorError(
            f"Query stats must be a mapping, got {type(value).__name__}",
            collaborator="database",
            accessor="get_query_stats",
        )

    return {
        str(query_id): coerce_record(
            QueryStats, stats, collaborator="database", accessor="get_query_stats"
        )
        for query_id, stats in value.items()
    }
