"""Signed bearer tokens for staff-only endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from lotto_hub.errors import AuthError, ForbiddenError

_SALT = "lotto-hub-auth"


class Role(str, Enum):
    ADMIN = "admin"
    SELLER = "seller"
    USER = "user"


STAFF_ROLES = frozenset({Role.ADMIN, Role.SELLER})


@dataclass(frozen=True)
class Principal:
    uid: str
    role: Role


class TokenService:
    def __init__(self, secret_key: str, max_age_seconds: int) -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_SALT)
        self._max_age = max_age_seconds

    def issue(self, uid: str, role: Role | str) -> str:
        return self._serializer.dumps({"uid": uid, "role": Role(role).value})

    def verify(self, token: str) -> Principal:
        try:
            data = self._serializer.loads(token, max_age=self._max_age)
        except SignatureExpired as exc:
            raise AuthError(message="Token has expired") from exc
        except BadSignature as exc:
            raise AuthError(message="Token is invalid") from exc

        if not isinstance(data, dict) or not data.get("uid"):
            raise AuthError(message="Token is invalid")
        try:
            role = Role(data.get("role"))
        except ValueError as exc:
            raise ForbiddenError(message="Unknown role") from exc
        return Principal(uid=str(data["uid"]), role=role)

    def authorize(self, header: str | None, roles: frozenset[Role] = STAFF_ROLES) -> Principal:
        """Check an ``Authorization: Bearer <token>`` header for one of ``roles``."""

        if not header or not header.startswith("Bearer "):
            raise AuthError(message="Missing or malformed authorization header")
        token = header[len("Bearer "):].strip()
        if not token:
            raise AuthError(message="Missing or malformed authorization header")

        principal = self.verify(token)
        if principal.role not in roles:
            raise ForbiddenError(message="Insufficient permissions")
        return principal
