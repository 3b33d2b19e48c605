# -*- coding: utf-8 -*-
"""
The request pipeline:

    authenticate -> parse url -> (bulk | single operation) -> dispatch -> serialize

The pipeline doesn't depend on a web framework, the host adapters (fastapi/api.py,
flask_api.py) convert their requests to a JsonApiRequest and write the JsonApiResponse.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional

import jaops
from .application import Application
from .authentication import authenticate
from .errors import InvalidPayload, JsonapiError, as_jsonapi_error, errors_document
from .jsonapi_types import JSONAPIBulkDocument
from .request import QueryArgs
from .resource import Resource
from .url import UrlData, convert_request_to_operation, url_data

STATUS_MAPPING = {
    "GET": HTTPStatus.OK.value,
    "POST": HTTPStatus.CREATED.value,
    "PATCH": HTTPStatus.OK.value,
    "PUT": HTTPStatus.OK.value,
    "DELETE": HTTPStatus.NO_CONTENT.value,
}

# methods that send the operation result in the response body
RESPONSE_METHODS = {"GET", "POST", "PATCH", "PUT"}

BULK_RESOURCE = "bulk"


@dataclass
class JsonApiRequest:
    method: str
    path: str
    query: Optional[QueryArgs] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)


@dataclass
class JsonApiResponse:
    """
    status None means the pipeline leaves the status to the host, body None means nothing was written
    """

    status: Optional[int] = None
    body: Optional[Dict[str, Any]] = None

    @property
    def is_empty(self) -> bool:
        return self.status is None and self.body is None


@dataclass
class RequestContext:
    """
    State of a single request, discarded when the response has been written
    """

    request: JsonApiRequest
    user: Optional[Resource] = None
    url_data: Optional[UrlData] = None


def error_response(error: JsonapiError) -> JsonApiResponse:
    return JsonApiResponse(status=error.status, body=errors_document(error))


class JsonApiPipeline:
    """
    Handles JSON:API requests for an Application
    """

    def __init__(self, app: Application) -> None:
        self.app = app

    async def handle(self, request: JsonApiRequest) -> JsonApiResponse:
        """
        :param request: JsonApiRequest
        :return: JsonApiResponse
        """
        context = RequestContext(request=request)
        try:
            await authenticate(self.app, context)
            context.url_data = data = url_data(request.path, self.app.namespace)

            body = request.body or {}
            if body.get("operations") is not None and body.get("data") is not None:
                raise InvalidPayload("JSONAPI payload cannot have both 'operations' and 'data' keys")
        except Exception as exc:
            return error_response(as_jsonapi_error(exc))

        if request.method.upper() == "PATCH" and data.resource == BULK_RESOURCE:
            return await self.handle_bulk(context)

        return await self.handle_operation(context)

    async def handle_bulk(self, context: RequestContext) -> JsonApiResponse:
        """
        Execute the "operations" of a bulk request, every operation has its own result
        """
        operations = context.request.body.get("operations") or []
        if not isinstance(operations, list):
            return error_response(InvalidPayload("'operations' should be a list"))
        results = await self.app.execute_operations(operations, context)
        body: JSONAPIBulkDocument = {"operations": results}
        return JsonApiResponse(body=body)

    async def handle_operation(self, context: RequestContext) -> JsonApiResponse:
        request = context.request
        method = request.method.upper()
        op = convert_request_to_operation(method, context.url_data or UrlData(), request.query, request.body)
        if op.is_incomplete():
            jaops.log.debug(f"Ignoring {method} {request.path}: no resource id")
            return JsonApiResponse()

        processor = self.app.processor_for(op.ref.type, context)
        if processor is None:
            jaops.log.debug(f"Ignoring {method} {request.path}: no processor for '{op.ref.type}'")
            return JsonApiResponse()

        try:
            result = await self.app.execute_operation(op, processor)
        except Exception as exc:
            return error_response(as_jsonapi_error(exc))

        body = result.to_document() if method in RESPONSE_METHODS else None
        return JsonApiResponse(status=STATUS_MAPPING.get(method), body=body)
