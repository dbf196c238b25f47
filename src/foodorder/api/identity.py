from __future__ import annotations

from collections.abc import Mapping

from fastapi import Request

from foodorder.application.ports.identity import (
    DEFAULT_USER_NAME,
    CustomerIdentity,
    IdentityProvider,
)
from foodorder.domain.common.ids import UserId

USER_ID_HEADER = "X-User-Id"
USER_EMAIL_HEADER = "X-User-Email"
USER_NAME_HEADER = "X-User-Name"


class HeaderIdentityProvider(IdentityProvider):
    """Identity asserted by the gateway in request headers.

    Presence of a user id is the only check; there is no authorization.
    """

    def __init__(self, headers: Mapping[str, str]) -> None:
        self._headers = headers

    def current_identity(self) -> CustomerIdentity | None:
        user_id = (self._headers.get(USER_ID_HEADER) or "").strip()
        if not user_id:
            return None
        return CustomerIdentity(
            user_id=UserId(user_id),
            email=(self._headers.get(USER_EMAIL_HEADER) or "").strip(),
            name=(self._headers.get(USER_NAME_HEADER) or "").strip() or DEFAULT_USER_NAME,
        )


def current_identity(request: Request) -> CustomerIdentity | None:
    return HeaderIdentityProvider(request.headers).current_identity()
