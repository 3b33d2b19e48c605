# processor.py: implements the OperationProcessor base class
#
# pylint: disable=unused-argument
#
"""
OperationProcessor: the handler of the operations for a resource type.

Subclasses implement the CRUD hooks returning raw records (dicts or objects with
attributes), the processor converts these records to Resource instances:

    class UserProcessor(OperationProcessor):
        @classmethod
        def should_handle(cls, resource_type):
            return resource_type == User.type

        async def get(self, op):
            return [{"id": "1", "email": "a@b.com"}]

        @jsonapi_attr
        def cool_factor(self, record):
            return 3

        @jsonapi_relationship("articles")
        async def articles(self, record):
            return await fetch_articles(record["id"])


get:
Type: coroutine
Description: Called for a "get" operation, returns a record or a list of records.

add:
Type: coroutine
Description: Called for an "add" operation (HTTP POST), returns the created record.

update:
Type: coroutine
Description: Called for an "update" operation (HTTP PATCH/PUT), returns the updated record.

remove:
Type: coroutine
Description: Called for a "remove" operation (HTTP DELETE).

identify:
Type: coroutine
Description: Not implemented by default. Called by the authentication gate with the id from the bearer token,
returns a list holding the record of the identified user.

attributes:
Type: Dict[str, Callable]
Description: computed attributes, the callables are invoked with the processor and the record.

relationships:
Type: Dict[str, Callable]
Description: relationship resolvers, the callables are invoked with the processor and the record.
"""
from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, List, Optional, Sequence, Type, Union
import jaops
from .errors import AccessDenied
from .operation import Operation
from .resource import Relationship, Resource

if TYPE_CHECKING:  # pragma: no cover
    from .application import Application
    from .pipeline import RequestContext

JSONAPI_ATTR_TAG = "_jaops_jsonapi_attr"
JSONAPI_REL_TAG = "_jaops_jsonapi_relationship"

Record = Any
Resolver = Callable[..., Union[Any, Awaitable[Any]]]


def jsonapi_attr(func: Optional[Callable] = None, *, name: Optional[str] = None):
    """
    Decorator for processor methods that compute an attribute from a record

    :param func: method, called as `func(processor, record)`
    :param name: attribute name, defaults to the method name
    """

    def decorator(attr_func: Callable) -> Callable:
        setattr(attr_func, JSONAPI_ATTR_TAG, name or attr_func.__name__)
        return attr_func

    if func is not None:
        return decorator(func)
    return decorator


def jsonapi_relationship(name: str):
    """
    Decorator for processor methods that resolve the related records of a relationship

    :param name: relationship name, as declared in the resource schema
    """

    def decorator(rel_func: Callable) -> Callable:
        setattr(rel_func, JSONAPI_REL_TAG, name)
        return rel_func

    return decorator


def is_jsonapi_attr(attr: Any) -> bool:
    """
    :param attr: `jsonapi_attr` decorated method
    :return: boolean
    """
    return getattr(attr, JSONAPI_ATTR_TAG, None) is not None


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def gather_dict(calls: Dict[str, Awaitable[Any]]) -> Dict[str, Any]:
    """
    Await the values of `calls` concurrently
    :return: dict with the same keys and the awaited results
    """
    keys = list(calls)
    values = await asyncio.gather(*(calls[key] for key in keys))
    return dict(zip(keys, values))


def pick(record: Record, keys: Sequence[str]) -> Dict[str, Any]:
    """
    :param record: dict or object
    :param keys: names of the keys (or attributes) to copy
    :return: dict with the keys that exist in `record`
    """
    if isinstance(record, Mapping):
        return {key: record[key] for key in keys if key in record}
    result = {}
    for key in keys:
        try:
            result[key] = getattr(record, key)
        except AttributeError:
            continue
    return result


def record_id(record: Record) -> Optional[str]:
    value = record.get("id") if isinstance(record, Mapping) else getattr(record, "id", None)
    return None if value is None else str(value)


class OperationProcessor:
    """
    Base processor, it handles nothing and can't add, update or remove
    """

    attributes: Dict[str, Resolver] = {}
    relationships: Dict[str, Resolver] = {}

    def __init__(
        self, app: "Application", resource_class: Type[Resource], context: Optional["RequestContext"] = None
    ) -> None:
        """
        :param app: application owning the processor registry
        :param resource_class: class of the resources this processor creates
        :param context: request context, holds the current user
        """
        self.app = app
        self.resource_class = resource_class
        self.context = context

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """
        Collect the `jsonapi_attr` and `jsonapi_relationship` decorated methods
        """
        super().__init_subclass__(**kwargs)
        attributes: Dict[str, Resolver] = {}
        relationships: Dict[str, Resolver] = {}
        for klass in reversed(cls.__mro__):
            attributes.update(vars(klass).get("attributes", {}))
            relationships.update(vars(klass).get("relationships", {}))
        for value in vars(cls).values():
            attr_name = getattr(value, JSONAPI_ATTR_TAG, None)
            if attr_name is not None:
                attributes[attr_name] = value
            rel_name = getattr(value, JSONAPI_REL_TAG, None)
            if rel_name is not None:
                relationships[rel_name] = value
        cls.attributes = attributes
        cls.relationships = relationships

    @classmethod
    def should_handle(cls, resource_type: str) -> bool:
        """
        :param resource_type: resource type name
        :return: whether this processor handles the operations for `resource_type`
        """
        return False

    @property
    def user(self) -> Optional[Resource]:
        """
        :return: the identity of the current request
        """
        return self.context.user if self.context is not None else None

    async def execute(self, op: Operation) -> Union[Resource, List[Resource], None]:
        """
        Run the hook named after the operation and convert its result to resources
        :param op: Operation
        :return: Resource, list of Resources or None when there's no hook for the operation
        """
        action = getattr(op.op, "value", op.op)
        hook = getattr(self, action, None) if action else None
        if not callable(hook):
            jaops.log.debug(f"{self.__class__.__name__} has no '{action}' hook")
            return None

        result = await hook(op)
        return await self.convert_to_resources(op, result)

    async def get_computed_properties(self, op: Operation, resource_class: Type[Resource], record: Record) -> Dict[str, Any]:
        type_fields = op.params.fields.get(resource_class.type)
        attributes = self.attributes
        if type_fields is not None:
            attributes = {key: func for key, func in attributes.items() if key in type_fields}

        return await gather_dict({key: _maybe_await(func(self, record)) for key, func in attributes.items()})

    async def get_attributes(self, op: Operation, resource_class: Type[Resource], record: Record) -> Dict[str, Any]:
        attribute_keys = op.params.fields.get(resource_class.type)
        if attribute_keys is None:
            attribute_keys = list(resource_class.schema.attributes)
        return pick(record, attribute_keys)

    async def get_relationships(self, op: Operation, record: Record) -> Dict[str, Any]:
        schema_relationships = self.resource_class.schema.relationships
        calls = {}
        for rel_name in op.params.include:
            relationship = schema_relationships.get(rel_name)
            if relationship is None:
                continue
            calls[rel_name] = self.get_relationship(op, rel_name, relationship, record)

        return await gather_dict(calls)

    async def get_relationship(self, op: Operation, rel_name: str, relationship: Relationship, record: Record) -> Union[Resource, List[Resource], None]:
        """
        :param relationship: schema relationship
        :param record: the record for which the related records are resolved
        :return: the related records, converted to resources of the relationship's type
        """
        related = await self.resolve_relationship(rel_name, relationship, record)
        return await self.convert_related(op, relationship, related)

    async def resolve_relationship(self, rel_name: str, relationship: Relationship, record: Record) -> Any:
        """
        :return: the raw related records, empty when there's no resolver for the relationship
        """
        resolver = self.relationships.get(rel_name) or self.relationships.get(relationship.key)
        if resolver is None:
            jaops.log.debug(f"{self.__class__.__name__} has no resolver for relationship '{rel_name}'")
            return [] if relationship.has_many else None
        return await _maybe_await(resolver(self, record))

    async def convert_related(self, op: Operation, relationship: Relationship, related: Any) -> Union[Resource, List[Resource], None]:
        if related is None:
            return [] if relationship.has_many else None

        target = await self.resource_for(relationship.type)
        if target is None:
            jaops.log.warning(f"Unknown resource type '{relationship.type}' for relationship '{relationship.key}'")
            return [] if relationship.has_many else None

        async def convert(related_record: Record) -> Resource:
            if isinstance(related_record, Resource):
                return related_record
            attributes = await self.get_attributes(op, target, related_record)
            return target(id=record_id(related_record), attributes=attributes)

        if relationship.has_many or isinstance(related, (list, tuple)):
            return list(await asyncio.gather(*(convert(item) for item in related)))
        return await convert(related)

    async def convert_to_resources(self, op: Operation, records: Union[Record, Sequence[Record], None]):
        """
        :param op: the operation that produced the records
        :param records: a record or list of records
        :return: a Resource or list of Resources, in the same order as `records`
        """
        if records is None:
            return None
        if isinstance(records, (list, tuple)):
            return list(await asyncio.gather(*(self.convert_to_resources(op, record) for record in records)))

        record = dict(records) if isinstance(records, Mapping) else records
        resource_class = await self.resource_for(op.ref.type) or self.resource_class

        attributes, computed_attributes, relationships = await asyncio.gather(
            self.get_attributes(op, resource_class, record),
            self.get_computed_properties(op, resource_class, record),
            self.get_relationships(op, record),
        )

        return resource_class(
            id=record_id(record),
            attributes={**attributes, **computed_attributes},
            relationships=relationships,
        )

    async def resource_for(self, resource_type: str) -> Optional[Type[Resource]]:
        return self.app.resource_for(resource_type)

    async def processor_for(self, resource_type: str) -> Optional["OperationProcessor"]:
        return self.app.processor_for(resource_type, self.context)

    async def get(self, op: Operation) -> Union[Record, List[Record]]:
        return []

    async def remove(self, op: Operation) -> None:
        raise AccessDenied(f"{self.resource_class.type} resources can't be removed")

    async def update(self, op: Operation) -> Record:
        raise AccessDenied(f"{self.resource_class.type} resources can't be updated")

    async def add(self, op: Operation) -> Record:
        raise AccessDenied(f"{self.resource_class.type} resources can't be added")
