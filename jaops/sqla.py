# sqla.py: OperationProcessor backed by a SQLAlchemy session
#
# pylint: disable=protected-access
#
"""
SqlAlchemyProcessor: processor for resources stored with a SQLAlchemy model

    class UserProcessor(SqlAlchemyProcessor):
        model = UserModel
        resource = User

    app = Application(resources=[User], processors=[UserProcessor], db_session=Session)

The declared resource attributes are mapped to the model attributes with the same name.
Relationships are resolved from the model relationship named by the relationship `key`,
unless the processor declares a resolver.

Query parameters (https://jsonapi.org/format/#fetching):
- filter[attr]=value: equality filter on a declared attribute
- sort=attr,-attr: sort by declared attributes (or id), descending if prefixed with "-"
- page[offset], page[limit] or page[number], page[size]
"""
from dataclasses import replace
from typing import Any, Dict, List, Optional, Type

from sqlalchemy import inspect as sqla_inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

import jaops
from .config import get_config
from .errors import InvalidPayload, NotFoundError
from .operation import Operation, OperationKind, OperationRef
from .processor import OperationProcessor
from .resource import Resource


class SqlAlchemyProcessor(OperationProcessor):
    """
    CRUD operations on `model` instances

    The session is a synchronous SQLAlchemy Session (or scoped_session): the hooks block
    the event loop while a query runs, concurrent operations on the same loop wait for it.
    Use a processor backed by an async driver when queries are slow.
    """

    model: Any = None
    resource: Optional[Type[Resource]] = None

    @classmethod
    def should_handle(cls, resource_type: str) -> bool:
        return cls.resource is not None and resource_type == cls.resource.type

    @property
    def session(self):
        """
        :return: the SQLAlchemy session of the application
        """
        session = self.app.db_session
        if session is None:
            raise RuntimeError(f"{self.__class__.__name__}: the application has no db_session")
        return session

    @property
    def primary_key(self):
        return sqla_inspect(self.model).primary_key[0]

    def _column_value(self, column_name: str, value: Any) -> Any:
        """
        convert a url (string) value to the python type of the column
        """
        column = sqla_inspect(self.model).columns.get(column_name)
        if column is None or value is None:
            return value
        try:
            python_type = column.type.python_type
        except NotImplementedError:  # pragma: no cover
            return value
        if isinstance(value, python_type):
            return value
        try:
            return python_type(value)
        except (TypeError, ValueError):
            raise InvalidPayload(f"Invalid value '{value}' for '{column_name}'")

    def get_instance(self, jsonapi_id: Any, failsafe: bool = False) -> Any:
        """
        :param jsonapi_id: resource id
        :param failsafe: return None instead of raising NotFoundError
        :return: model instance
        """
        try:
            pk_value = self._column_value(self.primary_key.name, jsonapi_id)
        except InvalidPayload:
            pk_value = None
        instance = self.session.get(self.model, pk_value) if pk_value is not None else None
        if instance is None and not failsafe:
            raise NotFoundError(f"{self.resource_class.type} {jsonapi_id}")
        return instance

    @property
    def declared_attributes(self) -> List[str]:
        return list(self.resource_class.schema.attributes)

    def filter_query(self, query: Select, filters: Dict[str, Any]) -> Select:
        for attr_name, attr_val in filters.items():
            if attr_name == "*":
                jaops.log.debug(f"{self.__class__.__name__}: custom filter '{attr_val}' ignored")
                continue
            if attr_name != "id" and attr_name not in self.declared_attributes:
                raise InvalidPayload(f'Invalid filter "{attr_name}", unknown attribute')
            column_name = self.primary_key.name if attr_name == "id" else attr_name
            query = query.where(getattr(self.model, column_name) == self._column_value(column_name, attr_val))
        return query

    def sort_query(self, query: Select, sort_attrs: List[str]) -> Select:
        """
        http://jsonapi.org/format/#fetching-sorting
        The sort order for each sort field MUST be ascending unless it is prefixed
        with a minus, in which case it MUST be descending.
        """
        for sort_attr in sort_attrs:
            reverse = sort_attr.startswith("-")
            attr_name = sort_attr[1:] if reverse else sort_attr
            if attr_name == "id":
                attr_name = self.primary_key.name
            elif attr_name not in self.declared_attributes:
                jaops.log.debug(f"{self.model} has no attribute {attr_name} in {self.declared_attributes}")
                continue
            attr = getattr(self.model, attr_name, None)
            if attr is None:
                continue
            query = query.order_by(attr.desc() if reverse else attr)
        return query

    def paginate(self, query: Select, page: Dict[str, Any]) -> Select:
        """
        http://jsonapi.org/format/#fetching-pagination
        page[number] and page[size] are converted to an offset and limit
        """
        try:
            offset = int(page.get("offset", 0))
            limit = int(page.get("limit", get_config("DEFAULT_PAGE_LIMIT")))
            if offset == 0 and "number" in page and "size" in page:
                limit = int(page["size"])
                offset = (int(page["number"]) - 1) * limit
        except (TypeError, ValueError):
            raise InvalidPayload(f"Invalid page parameters {page}")

        limit = min(limit, int(get_config("MAX_PAGE_LIMIT")))
        return query.offset(max(offset, 0)).limit(max(limit, 0))

    def _attributes_from_data(self, op: Operation) -> Dict[str, Any]:
        data = op.data
        if not isinstance(data, dict):
            raise InvalidPayload("Invalid data payload")
        resource_type = data.get("type")
        if resource_type is not None and resource_type != self.resource_class.type:
            raise InvalidPayload(f"Invalid type '{resource_type}', expected '{self.resource_class.type}'")
        attributes = data.get("attributes") or {}
        if not isinstance(attributes, dict):
            raise InvalidPayload("Invalid attributes")
        return {key: value for key, value in attributes.items() if key in self.declared_attributes}

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise

    async def execute(self, op: Operation):
        if op.op == OperationKind.GET and op.ref.id and op.ref.relationship:
            return await self.get_related(op)
        return await super().execute(op)

    async def get_related(self, op: Operation):
        """
        Relationship sub-resources, eg. /users/1/articles: the related records are
        converted to resources of the relationship type
        """
        relationship = self.resource_class.schema.relationships.get(op.ref.relationship)
        if relationship is None:
            raise NotFoundError(f"{self.resource_class.type} has no relationship '{op.ref.relationship}'")

        instance = self.get_instance(op.ref.id)
        related = await self.resolve_relationship(op.ref.relationship, relationship, instance)
        target_processor = await self.processor_for(relationship.type)
        if target_processor is None:
            return await self.convert_related(op, relationship, related)

        target_op = replace(op, ref=OperationRef(type=relationship.type))
        if relationship.has_many:
            related = list(related or [])
        return await target_processor.convert_to_resources(target_op, related)

    async def resolve_relationship(self, rel_name, relationship, record):
        if rel_name in self.relationships or relationship.key in self.relationships:
            return await super().resolve_relationship(rel_name, relationship, record)
        return getattr(record, relationship.key, None)

    async def get(self, op: Operation):
        if op.ref.id:
            return self.get_instance(op.ref.id)

        query = select(self.model)
        query = self.filter_query(query, op.params.filter)
        query = self.sort_query(query, op.params.sort)
        query = self.paginate(query, op.params.page)
        return list(self.session.scalars(query))

    async def identify(self, op: Operation):
        instance = self.get_instance(op.ref.id, failsafe=True)
        return [instance] if instance is not None else []

    async def add(self, op: Operation):
        attributes = self._attributes_from_data(op)
        instance = self.model(**attributes)
        jsonapi_id = op.data.get("id")
        if jsonapi_id is not None:
            setattr(instance, self.primary_key.name, self._column_value(self.primary_key.name, jsonapi_id))
        self.session.add(instance)
        self._commit()
        return instance

    async def update(self, op: Operation):
        instance = self.get_instance(op.ref.id)
        for attr_name, attr_val in self._attributes_from_data(op).items():
            setattr(instance, attr_name, attr_val)
        self._commit()
        return instance

    async def remove(self, op: Operation) -> None:
        instance = self.get_instance(op.ref.id)
        self.session.delete(instance)
        self._commit()
