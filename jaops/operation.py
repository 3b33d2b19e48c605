# -*- coding: utf-8 -*-
"""
Operations are the internal representation of a request:
    op: what to do (get, add, update, remove, identify)
    ref: which resource(s) it applies to
    params: query derived options (sparse fieldsets, includes, filter/sort/page)
    data: the JSON:API resource object of mutating requests
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .errors import InvalidPayload
from .jsonapi_types import JSONAPIDocument
from .resource import Resource
from .schemas import OperationModel


class OperationKind(str, Enum):
    GET = "get"
    ADD = "add"
    UPDATE = "update"
    REMOVE = "remove"
    IDENTIFY = "identify"


# operations that apply to a single, existing resource
ID_REQUIRED = {OperationKind.UPDATE, OperationKind.REMOVE}


@dataclass
class OperationRef:
    type: str
    id: Optional[str] = None
    relationship: Optional[str] = None


@dataclass
class OperationParams:
    fields: Dict[str, List[str]] = field(default_factory=dict)
    include: List[str] = field(default_factory=list)
    # filter, sort and page are passed to the processors as-is
    filter: Dict[str, Any] = field(default_factory=dict)
    sort: List[str] = field(default_factory=list)
    page: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Operation:
    op: Optional[OperationKind]
    ref: OperationRef
    params: OperationParams = field(default_factory=OperationParams)
    data: Optional[Any] = None

    def is_incomplete(self) -> bool:
        """
        :return: True for update and remove operations that don't reference a resource id
        """
        return self.op in ID_REQUIRED and not self.ref.id

    @classmethod
    def from_dict(cls, entry: Any) -> "Operation":
        """
        Create an operation from an entry of a bulk request
        :param entry: dict with "op", "ref", "params" and "data" keys
        :return: Operation
        """
        try:
            model = OperationModel.model_validate(entry)
        except PydanticValidationError as exc:
            raise InvalidPayload(f"Invalid operation: {exc.errors(include_url=False)}")

        try:
            kind: Optional[OperationKind] = OperationKind(model.op)
        except ValueError:
            kind = None

        ref_id = model.ref.id
        params = model.params
        return cls(
            op=kind,
            ref=OperationRef(
                type=model.ref.type,
                id=str(ref_id) if ref_id is not None else None,
                relationship=model.ref.relationship,
            ),
            params=OperationParams(
                fields=params.fields,
                include=params.include,
                filter=params.filter,
                sort=params.sort,
                page=params.page,
            ),
            data=model.data,
        )


ResourceData = Union[Resource, List[Resource], None]


@dataclass
class OperationResponse:
    data: ResourceData = None
    # related resources aren't collected by the core, processors may fill this
    included: List[Resource] = field(default_factory=list)

    def to_document(self) -> JSONAPIDocument:
        """
        :return: `{ "data": ..., "included": [...] }` with the resources encoded
        """
        if isinstance(self.data, (list, tuple)):
            data: Any = [resource.to_dict() for resource in self.data]
        elif isinstance(self.data, Resource):
            data = self.data.to_dict()
        else:
            data = self.data
        return {"data": data, "included": [resource.to_dict() for resource in self.included]}


def operation_from_mapping(values: Mapping[str, Any]) -> Operation:
    """
    :param values: an Operation or its dict representation
    :return: Operation
    """
    if isinstance(values, Operation):
        return values
    return Operation.from_dict(values)
