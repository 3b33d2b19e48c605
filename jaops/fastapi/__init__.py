# -*- coding: utf-8 -*-

from .api import JaopsFastAPI, install_jsonapi_exception_handlers
from .responses import JSONAPIResponse

__all__ = ("JaopsFastAPI", "JSONAPIResponse", "install_jsonapi_exception_handlers")
