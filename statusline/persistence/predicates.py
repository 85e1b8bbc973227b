"""
Predicate queries against persisted records.

A predicate is an exact-match condition on one column; a query is the
conjunction of its predicates.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import Select, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import ValidationError, create_error_context

ModelT = TypeVar("ModelT")


@dataclass(frozen=True)
class KeyValuePredicate:
    """Exact-match condition: ``field == value``."""

    field: str
    value: Any

    def clause(self, model: type[Any]) -> Any:
        columns = inspect(model).columns
        if self.field not in columns:
            raise ValidationError(
                f"{model.__name__} has no field '{self.field}'",
                context=create_error_context(operation="predicate_query"),
                field=self.field,
                value=self.value,
            )
        return getattr(model, self.field) == self.value


def build_predicate_query(model: type[ModelT], predicates: Iterable[KeyValuePredicate]) -> Select[tuple[ModelT]]:
    """Build a SELECT for ``model`` filtered by every predicate."""
    stmt = select(model)
    for predicate in predicates:
        stmt = stmt.where(predicate.clause(model))
    return stmt


async def find_by_predicates(
    session: AsyncSession, model: type[ModelT], predicates: Iterable[KeyValuePredicate]
) -> Sequence[ModelT]:
    """
    Return every ``model`` row matching all predicates.

    Raises:
        ValidationError: If a predicate names a column the model does not have
    """
    result = await session.execute(build_predicate_query(model, predicates))
    return result.scalars().all()
