"""Remembered-login and theme cookies.

Each cookie is set and cleared on its own; logout clears all of them.
"""

from __future__ import annotations

from typing import Optional

from flask import Request, Response

from ..core.constants import REMEMBER_MANAGER_COOKIE, REMEMBER_USER_COOKIE, THEME_COOKIE
from ..core.exceptions import ValidationError

THEMES = ("light", "dark")
_DAY_SECONDS = 24 * 60 * 60


def remembered_user_id(req: Request) -> Optional[str]:
    return req.cookies.get(REMEMBER_USER_COOKIE) or None


def remembers_manager(req: Request) -> bool:
    return req.cookies.get(REMEMBER_MANAGER_COOKIE) == "true"


def theme(req: Request) -> str:
    value = req.cookies.get(THEME_COOKIE)
    return value if value in THEMES else "light"


def remember_user(resp: Response, employee_id: str, *, days: int) -> None:
    resp.set_cookie(REMEMBER_USER_COOKIE, employee_id, max_age=days * _DAY_SECONDS, httponly=True, samesite="Lax")


def remember_manager(resp: Response, *, days: int) -> None:
    resp.set_cookie(REMEMBER_MANAGER_COOKIE, "true", max_age=days * _DAY_SECONDS, httponly=True, samesite="Lax")


def set_theme(resp: Response, value: str, *, days: int) -> None:
    if value not in THEMES:
        raise ValidationError("Theme must be light or dark")
    resp.set_cookie(THEME_COOKIE, value, max_age=days * _DAY_SECONDS, samesite="Lax")


def forget_user(resp: Response) -> None:
    resp.delete_cookie(REMEMBER_USER_COOKIE)


def forget_manager(resp: Response) -> None:
    resp.delete_cookie(REMEMBER_MANAGER_COOKIE)


def clear_theme(resp: Response) -> None:
    resp.delete_cookie(THEME_COOKIE)


def clear_all(resp: Response) -> None:
    forget_user(resp)
    forget_manager(resp)
    clear_theme(resp)
