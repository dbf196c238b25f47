from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from foodorder.domain.common.ids import UserId

DEFAULT_USER_NAME = "Usuario"


@dataclass(frozen=True)
class CustomerIdentity:
    user_id: UserId
    email: str = ""
    name: str = DEFAULT_USER_NAME


class IdentityProvider(Protocol):
    def current_identity(self) -> CustomerIdentity | None: ...
