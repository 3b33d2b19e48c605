# jaops to json encoding

import datetime
import decimal
import json
from typing import Any
from uuid import UUID
from flask.json.provider import DefaultJSONProvider
import jaops
from .config import is_debug
from .errors import JsonapiError
from .operation import OperationResponse
from .resource import Resource


class _JaopsJSONEncoder:
    """
    JSON encoding for jaops objects (resources, responses, errors) and common types
    """

    # pylint: disable=too-many-return-statements
    def default(self, obj, **kwargs):
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if obj is None:
            return None
        if isinstance(obj, Resource):
            return obj.to_dict()
        if isinstance(obj, OperationResponse):
            return obj.to_document()
        if isinstance(obj, JsonapiError):
            return obj.to_dict()
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, set):
            return list(obj)
        if isinstance(obj, UUID):  # pragma: no cover
            return str(obj)
        if isinstance(obj, decimal.Decimal):  # pragma: no cover
            return float(obj)
        if isinstance(obj, bytes):  # pragma: no cover
            if obj == b"":
                return ""
            jaops.log.debug("JaopsJSONEncoder: serializing bytes obj")
            return obj.hex()

        # getting here means a processor returned an attribute value we can't encode
        if not is_debug():  # pragma: no cover
            jaops.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
            return {"error": "JaopsJSONEncoder invalid object"}

        return str(obj)


class JaopsJSONProvider(_JaopsJSONEncoder, DefaultJSONProvider):
    """
    Flask JSON encoding
    """

    mimetype = "application/vnd.api+json"
    sort_keys = False


class JaopsJSONEncoder(_JaopsJSONEncoder, json.JSONEncoder):
    """
    Common JSON encoding
    """

    pass


def jsonapi_dumps(obj: Any) -> str:
    return json.dumps(obj, cls=JaopsJSONEncoder, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
