from typing import Any, Dict, List, Union

try:
    from typing import TypedDict
except ImportError:  # pragma: no cover
    from typing_extensions import TypedDict


class JSONAPIResourceIdentifier(TypedDict):
    id: str
    type: str


class JSONAPIResourceObject(JSONAPIResourceIdentifier, total=False):
    attributes: Dict[str, Any]
    relationships: Dict[str, Any]


JSONAPIData = Union[JSONAPIResourceObject, List[JSONAPIResourceObject], None]


class JSONAPIDocument(TypedDict, total=False):
    data: JSONAPIData
    included: List[JSONAPIResourceObject]


class JSONAPIErrorObject(TypedDict, total=False):
    status: int
    code: str
    detail: str


class JSONAPIErrorsDocument(TypedDict):
    errors: List[JSONAPIErrorObject]


class JSONAPIBulkDocument(TypedDict):
    operations: List[Union[JSONAPIDocument, JSONAPIErrorsDocument, None]]
