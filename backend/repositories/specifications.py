"""
Specification Pattern Implementation

Encapsulates query criteria in small composable objects. Listing endpoints
with many optional filters build one specification per supplied filter and
combine them with ``all_of``; filters that were not supplied simply drop out.
"""

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Optional, TypeVar
from sqlalchemy import and_, or_, not_, true
from sqlalchemy.orm import Query


T = TypeVar('T')


class Specification(ABC, Generic[T]):
    """
    Abstract base class for specifications.

    A specification encapsulates a single business rule or query criterion.
    """

    @abstractmethod
    def is_satisfied_by(self, candidate: T) -> bool:
        """
        Check if a candidate object satisfies this specification.

        Args:
            candidate: Object to check

        Returns:
            True if candidate satisfies specification
        """
        pass

    @abstractmethod
    def to_sql_filter(self):
        """
        Convert specification to SQLAlchemy filter expression.

        Returns:
            SQLAlchemy filter expression
        """
        pass

    def apply(self, query: Query) -> Query:
        """Restrict a query to rows satisfying this specification."""
        return query.filter(self.to_sql_filter())

    def __and__(self, other: "Specification[T]") -> "AndSpecification[T]":
        """Combine specifications with AND."""
        return AndSpecification(self, other)

    def __or__(self, other: "Specification[T]") -> "OrSpecification[T]":
        """Combine specifications with OR."""
        return OrSpecification(self, other)

    def __invert__(self) -> "NotSpecification[T]":
        """Negate specification with NOT."""
        return NotSpecification(self)


class MatchAllSpecification(Specification[T]):
    """Specification satisfied by every candidate."""

    def is_satisfied_by(self, candidate: T) -> bool:
        return True

    def to_sql_filter(self):
        return true()


class AndSpecification(Specification[T]):
    """Specification that combines two specifications with AND."""

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) and self.right.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return and_(self.left.to_sql_filter(), self.right.to_sql_filter())


class OrSpecification(Specification[T]):
    """Specification that combines two specifications with OR."""

    def __init__(self, left: Specification[T], right: Specification[T]):
        self.left = left
        self.right = right

    def is_satisfied_by(self, candidate: T) -> bool:
        return self.left.is_satisfied_by(candidate) or self.right.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return or_(self.left.to_sql_filter(), self.right.to_sql_filter())


class NotSpecification(Specification[T]):
    """Specification that negates another specification."""

    def __init__(self, spec: Specification[T]):
        self.spec = spec

    def is_satisfied_by(self, candidate: T) -> bool:
        return not self.spec.is_satisfied_by(candidate)

    def to_sql_filter(self):
        return not_(self.spec.to_sql_filter())


def all_of(specs: Iterable[Optional[Specification[T]]]) -> Specification[T]:
    """
    AND together every specification that is not None.

    Args:
        specs: Specifications, with None standing for "filter not supplied"

    Returns:
        Combined specification; matches everything when all are None
    """
    combined: Specification[T] = MatchAllSpecification()
    for spec in specs:
        if spec is not None:
            combined = combined & spec
    return combined
