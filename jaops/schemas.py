# -*- coding: utf-8 -*-
"""
pydantic models of the request payloads handled by the pipeline
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class PermissiveModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class JsonApiErrorObject(PermissiveModel):
    status: int
    code: str
    detail: Optional[str] = None


class JsonApiErrorDocument(PermissiveModel):
    errors: List[JsonApiErrorObject] = Field(default_factory=list)


class OperationRefModel(PermissiveModel):
    type: str = Field(min_length=1)
    id: Optional[Union[str, int]] = None
    relationship: Optional[str] = None


class OperationParamsModel(PermissiveModel):
    fields: Dict[str, List[str]] = Field(default_factory=dict)
    include: List[str] = Field(default_factory=list)
    filter: Dict[str, Any] = Field(default_factory=dict)
    sort: List[str] = Field(default_factory=list)
    page: Dict[str, Any] = Field(default_factory=dict)


class OperationModel(PermissiveModel):
    """
    An entry of the "operations" list of a bulk request
    """

    op: str
    ref: OperationRefModel
    params: OperationParamsModel = Field(default_factory=OperationParamsModel)
    data: Optional[Any] = None
