# -*- coding: utf-8 -*-
"""
The Application owns the resource and processor registries and executes operations.

    app = Application(namespace="api", resources=[User, Article], processors=[UserProcessor])
"""
from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, Union

import jwt

import jaops
from .config import get_config, set_config
from .errors import Unauthorized, as_jsonapi_error, errors_document
from .operation import Operation, OperationResponse, operation_from_mapping
from .processor import OperationProcessor
from .resource import Resource

if TYPE_CHECKING:  # pragma: no cover
    from .pipeline import RequestContext

TokenDecoder = Callable[[str], Optional[Mapping[str, Any]]]


class Application:
    """
    :param namespace: url prefix, stripped from the request path before parsing
    :param resources: Resource subclasses
    :param processors: OperationProcessor subclasses, the first one that handles a type is used
    :param token_decoder: callable that decodes a bearer token to its claims
    :param db_session: SQLAlchemy session (or scoped_session) used by the SqlAlchemyProcessor
    :param config: JAOPS configuration overrides
    """

    def __init__(
        self,
        namespace: Optional[str] = None,
        resources: Iterable[Type[Resource]] = (),
        processors: Iterable[Type[OperationProcessor]] = (),
        token_decoder: Optional[TokenDecoder] = None,
        db_session: Any = None,
        **config: Any,
    ) -> None:
        if config:
            set_config(**config)
        self.namespace = (namespace if namespace is not None else get_config("NAMESPACE")) or ""
        self.token_decoder = token_decoder
        self.db_session = db_session
        self.resources: Dict[str, Type[Resource]] = {}
        self.processors: List[Type[OperationProcessor]] = []
        # type name => processor class, rebuilt whenever a resource or processor is registered
        self._processor_map: Dict[str, Type[OperationProcessor]] = {}

        for resource_class in resources:
            self.register_resource(resource_class)
        for processor_class in processors:
            self.register_processor(processor_class)

    def register_resource(self, resource_class: Type[Resource]) -> None:
        if not (isinstance(resource_class, type) and issubclass(resource_class, Resource)):
            raise TypeError(f"'{resource_class}' should be a Resource subclass")
        self.resources[resource_class.type] = resource_class
        self._build_processor_map()

    def register_processor(self, processor_class: Type[OperationProcessor]) -> None:
        if not (isinstance(processor_class, type) and issubclass(processor_class, OperationProcessor)):
            raise TypeError(f"'{processor_class}' should be an OperationProcessor subclass")
        self.processors.append(processor_class)
        self._build_processor_map()

    def _build_processor_map(self) -> None:
        processor_map = {}
        for resource_type in self.resources:
            for processor_class in self.processors:
                if processor_class.should_handle(resource_type):
                    processor_map[resource_type] = processor_class
                    break
        self._processor_map = processor_map
        jaops.log.debug(f"Processors: { {k: v.__name__ for k, v in processor_map.items()} }")

    def resource_for(self, resource_type: str) -> Optional[Type[Resource]]:
        """
        :param resource_type: type name
        :return: the registered Resource subclass or None
        """
        return self.resources.get(resource_type)

    def processor_for(self, resource_type: str, context: Optional["RequestContext"] = None) -> Optional[OperationProcessor]:
        """
        :param resource_type: type name
        :param context: request context passed to the processor
        :return: a new processor instance for the type, or None when no processor handles it
        """
        processor_class = self._processor_map.get(resource_type)
        if processor_class is None:
            return None
        return processor_class(self, self.resources[resource_type], context)

    async def execute_operation(self, op: Operation, processor: OperationProcessor) -> OperationResponse:
        """
        :param op: Operation
        :param processor: processor for `op.ref.type`
        :return: OperationResponse
        """
        data = await processor.execute(op)
        return OperationResponse(data=data, included=[])

    async def _execute_bulk_entry(self, entry: Union[Operation, Mapping[str, Any]], context: Optional["RequestContext"]):
        try:
            op = operation_from_mapping(entry)
            if op.is_incomplete():
                return None
            processor = self.processor_for(op.ref.type, context)
            if processor is None:
                return None
            result = await self.execute_operation(op, processor)
            return result.to_document()
        except Exception as exc:
            return errors_document(as_jsonapi_error(exc))

    async def execute_operations(
        self, ops: Iterable[Union[Operation, Mapping[str, Any]]], context: Optional["RequestContext"] = None
    ) -> List[Optional[Dict[str, Any]]]:
        """
        Execute the operations of a bulk request.
        The operations are independent, a failing operation doesn't affect the others.

        :param ops: operations (or their dict representation)
        :param context: request context
        :return: for each operation, in order: the response document, an errors document or None
        when the operation was skipped
        """
        return list(await asyncio.gather(*(self._execute_bulk_entry(entry, context) for entry in ops)))

    def decode_token(self, token: str) -> Optional[Mapping[str, Any]]:
        """
        :param token: bearer token
        :return: the token claims, None if the token can't be decoded

        The signature is only verified when JWT_SECRET is configured
        """
        if self.token_decoder is not None:
            return self.token_decoder(token)

        secret = get_config("JWT_SECRET")
        if secret:
            try:
                return jwt.decode(token, secret, algorithms=get_config("JWT_ALGORITHMS"))
            except jwt.PyJWTError as exc:
                raise Unauthorized(f"Invalid token: {exc}")

        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.PyJWTError as exc:
            jaops.log.warning(f"Failed to decode bearer token: {exc}")
            return None
