"""
Configuration model for query lineage analysis.

This module defines the LineageConfig class and ErrorMode enum, which control
how the graph builder reacts to irregular input and how names are parsed,
rendered and keyed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ErrorMode(str, Enum):
    """Enumeration of error handling modes for construction-time irregularities.

    Attributes:
        FAIL: Raise the matching LineageError subclass immediately.
        WARN: Record a diagnostic, log a warning and continue with a partial
            graph.
        IGNORE: Continue silently (the event is only logged at debug level).

    Example:
        >>> ErrorMode.WARN.value
        'warn'
        >>> ErrorMode.values()
        ['fail', 'warn', 'ignore']
    """

    FAIL = "fail"
    WARN = "warn"
    IGNORE = "ignore"

    @classmethod
    def values(cls) -> list[str]:
        """Return a list of all possible error mode values."""
        return [member.value for member in cls]


@dataclass
class LineageConfig:
    """Configuration settings for building a dependency graph.

    Attributes:
        dialect: sqlglot dialect name used for parsing SQL text and rendering
            expressions (e.g. "snowflake", "postgres"). None uses sqlglot's
            default dialect.
        result_name: Registry key of the sentinel entity that stands for the
            query's final output. Defaults to "__result__".
        normalize_case: If True, table names, aliases and CTE names are
            lower-cased before they are used as registry keys.
        on_unsupported: What to do with set operations, non-query statements
            and unhandled table factors. Defaults to ErrorMode.WARN.
        on_unaliased_subquery: What to do with a derived table that has no
            alias. Defaults to ErrorMode.WARN.
        on_unresolved: What to do with a column reference that cannot be
            attributed to a table in its scope. Defaults to ErrorMode.WARN.

    Example:
        >>> config = LineageConfig(dialect="snowflake")
        >>> config.result_name
        '__result__'
        >>> strict = LineageConfig(on_unsupported=ErrorMode.FAIL)
    """

    dialect: Optional[str] = None
    result_name: str = "__result__"
    normalize_case: bool = False
    on_unsupported: ErrorMode = ErrorMode.WARN
    on_unaliased_subquery: ErrorMode = ErrorMode.WARN
    on_unresolved: ErrorMode = ErrorMode.WARN

    def __post_init__(self) -> None:
        """Validate configuration settings."""
        if self.dialect is not None and not isinstance(self.dialect, str):
            raise TypeError("dialect must be a string or None")
        if not isinstance(self.result_name, str):
            raise TypeError("result_name must be a string")
        if not self.result_name.strip():
            raise ValueError("result_name cannot be empty")
        if not isinstance(self.normalize_case, bool):
            raise TypeError("normalize_case must be a boolean")
        if not isinstance(self.on_unsupported, ErrorMode):
            raise TypeError("on_unsupported must be an ErrorMode instance")
        if not isinstance(self.on_unaliased_subquery, ErrorMode):
            raise TypeError("on_unaliased_subquery must be an ErrorMode instance")
        if not isinstance(self.on_unresolved, ErrorMode):
            raise TypeError("on_unresolved must be an ErrorMode instance")

    @classmethod
    def strict(cls, **overrides) -> "LineageConfig":
        """Build a config that fails on every construction-time irregularity.

        Args:
            **overrides: Any other LineageConfig field.

        Returns:
            LineageConfig with all error modes set to ErrorMode.FAIL.
        """
        settings = {
            "on_unsupported": ErrorMode.FAIL,
            "on_unaliased_subquery": ErrorMode.FAIL,
            "on_unresolved": ErrorMode.FAIL,
        }
        settings.update(overrides)
        return cls(**settings)

    def normalize(self, name: str) -> str:
        """Apply the configured case rule to a table name or alias."""
        name = name.strip()
        return name.lower() if self.normalize_case else name
