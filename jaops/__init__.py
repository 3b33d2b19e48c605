# flake8: noqa: F401
#
# The logger has to be defined before the other modules are imported,
# they log through `jaops.log`
#
from .jaops_init import JAOPS, log
from .errors import (
    ErrorKind,
    JsonapiError,
    UnhandledError,
    AccessDenied,
    Unauthorized,
    NotFoundError,
    InvalidPayload,
    jsonapi_errors,
)
from .resource import Resource, ResourceSchema, Relationship
from .operation import Operation, OperationKind, OperationRef, OperationParams, OperationResponse
from .processor import OperationProcessor, jsonapi_attr, jsonapi_relationship
from .application import Application
from .pipeline import JsonApiPipeline, JsonApiRequest, JsonApiResponse, RequestContext
from .json_encoder import JaopsJSONEncoder, JaopsJSONProvider
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "JAOPS",
    "Application",
    # resources:
    "Resource",
    "ResourceSchema",
    "Relationship",
    # operations:
    "Operation",
    "OperationKind",
    "OperationRef",
    "OperationParams",
    "OperationResponse",
    # processors:
    "OperationProcessor",
    "jsonapi_attr",
    "jsonapi_relationship",
    # pipeline:
    "JsonApiPipeline",
    "JsonApiRequest",
    "JsonApiResponse",
    "RequestContext",
    # json:
    "JaopsJSONEncoder",
    "JaopsJSONProvider",
    # Errors:
    "ErrorKind",
    "JsonapiError",
    "UnhandledError",
    "AccessDenied",
    "Unauthorized",
    "NotFoundError",
    "InvalidPayload",
    "jsonapi_errors",
)
