# -*- coding: utf-8 -*-
"""
Flask host: a blueprint with a catch-all async view running the JSON:API pipeline.
Async views require the "async" extra of Flask (asgiref).
"""
from typing import Optional

from flask import Blueprint, Flask, Response, make_response, request

from .application import Application
from .config import get_config
from .errors import JsonapiError, errors_document
from .json_encoder import JaopsJSONProvider
from .pipeline import JsonApiPipeline, JsonApiRequest, JsonApiResponse
from .request import load_payload

HTTP_METHODS = ["GET", "POST", "PATCH", "PUT", "DELETE"]
JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class JaopsFlaskAPI:
    """
    Serve an Application's resources from a Flask app

    :param app: Flask app
    :param application: Application
    :param name: blueprint name
    """

    def __init__(self, app: Optional[Flask], application: Application, name: str = "jaops") -> None:
        self.application = application
        self.pipeline = JsonApiPipeline(application)
        self.blueprint = self.create_blueprint(name)
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")
        app.json = JaopsJSONProvider(app)
        app.url_map.strict_slashes = False
        app.register_blueprint(self.blueprint)

    def create_blueprint(self, name: str) -> Blueprint:
        namespace = self.application.namespace.strip("/")
        blueprint = Blueprint(name, __name__, url_prefix=f"/{namespace}" if namespace else None)

        blueprint.add_url_rule("/", "jsonapi_root", self.view, methods=HTTP_METHODS, defaults={"path": ""})
        blueprint.add_url_rule("/<path:path>", "jsonapi", self.view, methods=HTTP_METHODS)

        @blueprint.errorhandler(JsonapiError)
        def handle_jsonapi_error(exc: JsonapiError):
            return self.render(JsonApiResponse(status=exc.status, body=errors_document(exc)))

        return blueprint

    async def view(self, path: str = "") -> Response:
        jsonapi_request = JsonApiRequest(
            method=request.method,
            path=request.path,
            query=request.query_string,
            headers=dict(request.headers),
            body=load_payload(request.get_data()),
        )
        result = await self.pipeline.handle(jsonapi_request)
        return self.render(result)

    @staticmethod
    def render(result: JsonApiResponse) -> Response:
        if result.body is None:
            return make_response("", result.status or int(get_config("NOOP_STATUS")))
        response = make_response(result.body, result.status or int(get_config("BULK_STATUS")))
        response.mimetype = JSONAPI_MEDIA_TYPE
        return response
