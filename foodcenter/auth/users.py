from __future__ import annotations

import logging
import uuid
from typing import Any

import bcrypt

from ..config import DEFAULT_APP_CONFIG
from .models import Role, UserCreate, UserOut

logger = logging.getLogger(__name__)

_users: dict[str, dict[str, Any]] = {}


class UserExistsError(Exception):
    """Raised when an e-mail id is already registered."""


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _to_out(record: dict[str, Any]) -> UserOut:
    return UserOut(**{k: v for k, v in record.items() if k != "password_hash"})


def _find_by_email(email_id: str) -> dict[str, Any] | None:
    needle = email_id.lower()
    for record in _users.values():
        if record["email_id"].lower() == needle:
            return record
    return None


def create_user(body: UserCreate) -> UserOut:
    if _find_by_email(body.email_id):
        raise UserExistsError(body.email_id)
    record = {
        "id": uuid.uuid4().hex,
        "role": body.role,
        "full_name": body.full_name,
        "email_id": body.email_id,
        "phone_number": body.phone_number,
        "password_hash": _hash_password(body.password),
    }
    _users[record["id"]] = record
    logger.info("Created user %s with role %s", record["id"], body.role.value)
    return _to_out(record)


def list_users() -> list[UserOut]:
    return [_to_out(r) for r in _users.values()]


def get_user(user_id: str) -> UserOut | None:
    record = _users.get(user_id)
    return _to_out(record) if record else None


def authenticate(email_id: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, email_id, role}`` or ``None``."""
    record = _find_by_email(email_id)
    if record and _verify_password(password, record["password_hash"]):
        return {"id": record["id"], "email_id": record["email_id"], "role": record["role"].value}
    return None


def clear_users() -> None:
    """Drop every user except the seeded admin."""
    _users.clear()
    _seed_users()


def _seed_users() -> None:
    """Pre-seed the admin account on import."""
    create_user(
        UserCreate(
            full_name="Administrator",
            email_id=DEFAULT_APP_CONFIG.admin_email,
            password=DEFAULT_APP_CONFIG.admin_password,
            role=Role.ADMIN,
        )
    )


_seed_users()
