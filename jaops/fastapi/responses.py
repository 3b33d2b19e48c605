# -*- coding: utf-8 -*-

from typing import Any

from fastapi.responses import JSONResponse

from ..json_encoder import jsonapi_dumps


class JSONAPIResponse(JSONResponse):
    """
    JSON:API requires 'application/vnd.api+json'
    """
    media_type = "application/vnd.api+json"

    def render(self, content: Any) -> bytes:
        return jsonapi_dumps(content).encode("utf-8")
