# -*- coding: utf-8 -*-
"""
Translation of a request path and method to an Operation

    [/{namespace}]/{resource}[/{id}][/relationships][/{relationship}]

/users/1/articles and /users/1/relationships/articles both reference the
"articles" relationship, the latter sets is_relationships.
"""
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Mapping, Optional
from .inflection import resource_type
from .operation import Operation, OperationKind, OperationRef
from .request import QueryArgs, parse_params

OPERATION_MAPPING = {
    "GET": OperationKind.GET,
    "POST": OperationKind.ADD,
    "PATCH": OperationKind.UPDATE,
    "PUT": OperationKind.UPDATE,
    "DELETE": OperationKind.REMOVE,
}


@dataclass(frozen=True)
class UrlData:
    resource: Optional[str] = None
    id: Optional[str] = None
    relationship: Optional[str] = None
    is_relationships: bool = False


@lru_cache(maxsize=32)
def url_regexp(namespace: str = "") -> "re.Pattern[str]":
    """
    :param namespace: optional leading path segment, eg. "api"
    :return: compiled url grammar
    """
    namespace = namespace.strip("/")
    namespace_part = rf"((?P<namespace>{re.escape(namespace)})(/+|$))?" if namespace else ""
    return re.compile(
        r"^(/+)?"
        + namespace_part
        + r"(?P<resource>[^\s/?]+)?(/+)?"
        + r"((?P<id>[^\s/?]+)?(/+)?(?P<relationships>relationships)?(/+)?)?"
        + r"(?P<relationship>[^\s/?]+)?(/+)?$"
    )


def url_data(path: str, namespace: str = "") -> UrlData:
    """
    :param path: request path
    :param namespace: optional leading path segment
    :return: the resource, id and relationship referenced by the path
    """
    match = url_regexp(namespace or "").match(path or "")
    if match is None:
        return UrlData()
    groups = match.groupdict()
    return UrlData(
        resource=groups["resource"],
        id=groups["id"],
        relationship=groups["relationship"],
        is_relationships=bool(groups["relationships"]),
    )


def convert_request_to_operation(
    method: str, data: UrlData, query: Optional[QueryArgs] = None, body: Optional[Mapping[str, Any]] = None
) -> Operation:
    """
    :param method: http method, methods that aren't in OPERATION_MAPPING result in an operation without `op`
    :param data: parsed url
    :param query: url query arguments
    :param body: request payload
    :return: Operation
    """
    return Operation(
        op=OPERATION_MAPPING.get(method.upper()),
        ref=OperationRef(type=resource_type(data.resource or ""), id=data.id, relationship=data.relationship),
        params=parse_params(query),
        data=(body or {}).get("data"),
    )
