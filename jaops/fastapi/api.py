# -*- coding: utf-8 -*-

from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import Depends as FastAPIDepends, FastAPI, Request, Response
from fastapi.params import Depends as DependsParam
from starlette.exceptions import HTTPException as StarletteHTTPException

import jaops
from ..application import Application
from ..config import get_config
from ..errors import ErrorKind, JsonapiError, errors_document
from ..pipeline import JsonApiPipeline, JsonApiRequest, JsonApiResponse
from ..request import load_payload
from ..schemas import JsonApiErrorDocument
from .responses import JSONAPIResponse

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"
HTTP_METHODS = ["GET", "POST", "PATCH", "PUT", "DELETE"]

STATUS_ERROR_KINDS = {
    HTTPStatus.BAD_REQUEST.value: ErrorKind.INVALID_PAYLOAD,
    HTTPStatus.UNAUTHORIZED.value: ErrorKind.UNAUTHORIZED,
    HTTPStatus.FORBIDDEN.value: ErrorKind.ACCESS_DENIED,
    HTTPStatus.NOT_FOUND.value: ErrorKind.NOT_FOUND,
}


def _jsonapi_http_exception_payload(exc: StarletteHTTPException) -> Dict[str, Any]:
    status_code = int(exc.status_code)
    kind = STATUS_ERROR_KINDS.get(status_code, ErrorKind.UNHANDLED)
    error: Dict[str, Any] = {"status": status_code, "code": kind.value}
    if kind is ErrorKind.INVALID_PAYLOAD and exc.detail:
        error["detail"] = str(exc.detail)
    return {"errors": [error]}


def install_jsonapi_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(JsonapiError)
    async def _jsonapi_error_handler(_request: Request, exc: JsonapiError):
        return JSONAPIResponse(status_code=exc.status, content=errors_document(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _jsonapi_starlette_http_error_handler(_request: Request, exc: StarletteHTTPException):
        payload = _jsonapi_http_exception_payload(exc)
        return JSONAPIResponse(status_code=int(exc.status_code), content=payload)


def render_response(result: JsonApiResponse) -> Response:
    """
    :param result: pipeline response
    :return: starlette response, the status defaults to NOOP_STATUS when nothing was written
    and to BULK_STATUS for bulk results
    """
    if result.body is None:
        return Response(status_code=result.status or int(get_config("NOOP_STATUS")))
    return JSONAPIResponse(status_code=result.status or int(get_config("BULK_STATUS")), content=result.body)


class JaopsFastAPI:
    """
    Serve an Application's resources from a FastAPI app

    :param app: FastAPI app
    :param application: Application
    :param dependencies: FastAPI dependencies of the JSON:API route
    """

    def __init__(self, app: FastAPI, application: Application, dependencies: Optional[List[Any]] = None) -> None:
        self.app = app
        self.application = application
        self.pipeline = JsonApiPipeline(application)
        install_jsonapi_exception_handlers(app)

        prefix = f"/{application.namespace.strip('/')}" if application.namespace.strip("/") else ""
        app.add_api_route(
            prefix + "/{path:path}",
            self.endpoint,
            methods=HTTP_METHODS,
            response_class=JSONAPIResponse,
            dependencies=self._normalize_dependencies(dependencies),
            responses={
                HTTPStatus.BAD_REQUEST.value: {"model": JsonApiErrorDocument},
                HTTPStatus.INTERNAL_SERVER_ERROR.value: {"model": JsonApiErrorDocument},
            },
            summary="JSON:API operations",
        )

    def _normalize_dependencies(self, dependencies: Optional[List[Any]]) -> List[DependsParam]:
        if not dependencies:
            return []
        normalized: List[DependsParam] = []
        for dependency in dependencies:
            if isinstance(dependency, DependsParam):
                normalized.append(dependency)
                continue
            if callable(dependency):
                normalized.append(FastAPIDepends(dependency))
                continue
            raise TypeError("dependencies items must be callables or fastapi.Depends(...) instances")
        return normalized

    async def endpoint(self, request: Request, path: str = "") -> Response:
        content_type = request.headers.get("content-type", "").split(";")[0].strip()
        if content_type and content_type not in ("application/json", JSONAPI_MEDIA_TYPE):
            jaops.log.warning(f'Invalid Media Type! "{content_type}"')

        body = load_payload(await request.body())
        jsonapi_request = JsonApiRequest(
            method=request.method,
            path=request.url.path,
            query=request.url.query,
            headers=dict(request.headers),
            body=body,
        )
        result = await self.pipeline.handle(jsonapi_request)
        return render_response(result)
