"""
Parse the jsonapi-related request arguments:
- query args: fields[], include, filter[], sort, page[]
- body: valid json object

http://jsonapi.org/format/#fetching
"""

import json
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qsl
import jaops
from .errors import InvalidPayload
from .operation import OperationParams

QueryArgs = Union[str, bytes, Mapping[str, str], Iterable[Tuple[str, str]]]

FILTER_ARG = re.compile(r"^filter\[(\w+)\]$")
FIELDS_ARG = re.compile(r"^fields\[(\w+)\]$")
PAGE_ARG = re.compile(r"^page\[(\w+)\]$")


def _query_items(query: Optional[QueryArgs]) -> Iterable[Tuple[str, str]]:
    if not query:
        return []
    if isinstance(query, bytes):
        query = query.decode("latin-1")
    if isinstance(query, str):
        return parse_qsl(query.lstrip("?"), keep_blank_values=True)
    if isinstance(query, Mapping):
        return list(query.items())
    return list(query)


def _split_csv(val: str) -> list:
    """
    :return: the non-empty, unique values in a comma separated string, in order of appearance
    """
    result = []
    for item in val.split(","):
        item = item.strip()
        if item and item not in result:
            result.append(item)
    return result


def parse_params(query: Optional[QueryArgs]) -> OperationParams:
    """
    parse the jsonapi request arguments:
    - fields[type]: https://jsonapi.org/format/#fetching-sparse-fieldsets
    - include: https://jsonapi.org/format/#fetching-includes
    - filter, filter[attr]
    - sort
    - page[offset], page[limit], page[number], page[size]

    :param query: url query string or its (key, value) pairs
    :return: OperationParams
    """
    params = OperationParams()
    for arg, val in _query_items(query):
        if arg == "include":
            params.include = _split_csv(val)
            continue

        if arg == "sort":
            params.sort = _split_csv(val)
            continue

        if arg == "filter":
            # custom filter, passed to the processor unparsed
            params.filter["*"] = val
            continue

        fields_attr = FIELDS_ARG.match(arg)
        if fields_attr:
            params.fields[fields_attr.group(1)] = _split_csv(val)
            continue

        filter_attr = FILTER_ARG.match(arg)
        if filter_attr:
            params.filter[filter_attr.group(1)] = val
            continue

        page_attr = PAGE_ARG.match(arg)
        if page_attr:
            try:
                params.page[page_attr.group(1)] = int(val)
            except ValueError:
                jaops.log.debug(f"Non-numeric page parameter {arg}={val}")
                params.page[page_attr.group(1)] = val

    return params


def load_payload(raw: Union[bytes, str, None]) -> Dict[str, Any]:
    """
    :param raw: request body
    :return: jsonapi request payload, an empty dict when there's no body
    """
    if raw is None:
        return {}
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidPayload(f"Invalid JSON Payload : {exc}")
    if not raw.strip():
        return {}
    try:
        result = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidPayload(f"Invalid JSON Payload : {exc}")
    if not isinstance(result, dict):
        raise InvalidPayload(f"Invalid JSON Payload : {result}")
    return result
