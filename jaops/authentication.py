# -*- coding: utf-8 -*-
"""
Bearer token authentication

The token is decoded (see Application.decode_token) and its "id" claim is used
to execute an "identify" operation for the user resource. The identified user
is stored on the request context for the remainder of the request.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional

import jaops
from .config import get_config
from .operation import Operation, OperationKind, OperationParams, OperationRef
from .resource import Resource

if TYPE_CHECKING:  # pragma: no cover
    from .application import Application
    from .pipeline import RequestContext

BEARER_PREFIX = "Bearer "


def bearer_token(headers: Mapping[str, str]) -> Optional[str]:
    """
    :param headers: request headers
    :return: the token of a "Bearer" authorization header
    """
    auth_header = None
    for name, value in headers.items():
        if name.lower() == "authorization":
            auth_header = value
            break
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    token = auth_header[len(BEARER_PREFIX) :].strip()
    return token or None


def identify_operation(user_id: Any) -> Operation:
    return Operation(
        op=OperationKind.IDENTIFY,
        ref=OperationRef(type=get_config("USER_TYPE"), id=str(user_id)),
        params=OperationParams(),
    )


async def authenticate(app: "Application", context: "RequestContext") -> Optional[Resource]:
    """
    Set `context.user` to the user identified by the bearer token, if any
    :param app: Application
    :param context: request context
    :return: the current user
    """
    context.user = None

    token = bearer_token(context.request.headers)
    if token is None:
        return None

    token_payload = app.decode_token(token)
    user_id = token_payload.get("id") if isinstance(token_payload, Mapping) else None
    if not user_id:
        return None

    op = identify_operation(user_id)
    processor = app.processor_for(op.ref.type, context)
    if processor is None:
        jaops.log.debug(f"No processor to identify '{op.ref.type}' {user_id}")
        return None

    result = await app.execute_operation(op, processor)
    users = result.data
    if isinstance(users, (list, tuple)):
        context.user = users[0] if users else None
    else:
        context.user = users

    return context.user
