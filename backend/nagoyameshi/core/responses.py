from __future__ import annotations

from fastapi.responses import RedirectResponse

from nagoyameshi.core.config import settings
from nagoyameshi.core.messages import MessageCode

FLASH_COOKIE = "flash_message"
ERROR_COOKIE = "error_message"


def _flash(response: RedirectResponse, key: str, code: MessageCode) -> None:
    # one-shot: the front-end reads the code, shows the text, and the cookie expires
    response.set_cookie(
        key=key,
        value=code.value,
        max_age=60,
        path="/",
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        domain=settings.COOKIE_DOMAIN,
    )


def redirect(
    url: str,
    *,
    flash: MessageCode | None = None,
    error: MessageCode | None = None,
) -> RedirectResponse:
    response = RedirectResponse(url, status_code=302)
    if flash is not None:
        _flash(response, FLASH_COOKIE, flash)
    if error is not None:
        _flash(response, ERROR_COOKIE, error)
    return response
