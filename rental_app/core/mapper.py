from typing import Any, Iterable, Mapping, Type, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class ORMMapper:
    @staticmethod
    def one(item, schema: Type[T]) -> T:
        return schema.model_validate(item)

    @staticmethod
    def many(items: Iterable, schema: Type[T]) -> list[T]:
        return [schema.model_validate(item) for item in items]

    @staticmethod
    def coerce(data: Union[BaseModel, Mapping[str, Any]], schema: Type[T]) -> T:
        """Accept either a schema instance or a plain mapping from the caller."""
        if isinstance(data, schema):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_unset=True)
        return schema.model_validate(dict(data))

    @staticmethod
    def changes(data: Union[BaseModel, Mapping[str, Any]], schema: Type[T]) -> dict:
        """Only the fields the caller set, so unset fields are never merged."""
        return ORMMapper.coerce(data, schema).model_dump(exclude_unset=True)
