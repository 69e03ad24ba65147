from typing import Iterable, Type, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class ORMMapper:
    """Builds response schemas from ORM rows, aggregation results or cached JSON."""

    @staticmethod
    def one(item, schema: Type[T]) -> T:
        if isinstance(item, dict):
            return schema.model_validate(item)
        return schema.model_validate(item, from_attributes=True)

    @classmethod
    def many(cls, items: Iterable, schema: Type[T]) -> list[T]:
        return [cls.one(item, schema) for item in items]

    @staticmethod
    def dump_many(items: Iterable[BaseModel]) -> list[dict]:
        return [item.model_dump(mode="json") for item in items]
