from fastapi import APIRouter, Depends, HTTPException, Path
from typing import Dict
from signed_cookies.core.dependencies import get_cookie_jar, get_cookies, valid_cookie_name
from signed_cookies.models.cookie import CookieSetRequest, CookieSetResponse, UnsignResult
from signed_cookies.services.cookie_jar import CookieJar
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cookies", tags=["cookies"])


@router.get("", response_model=Dict[str, str])
async def list_cookies(cookies: Dict[str, str] = Depends(get_cookies)):
    """Cookies sent with this request, decoded but not verified"""
    return cookies


@router.get("/{name}/verify", response_model=UnsignResult)
async def verify_cookie(
    name: str = Path(..., description="Cookie name"),
    cookies: Dict[str, str] = Depends(get_cookies),
    jar: CookieJar = Depends(get_cookie_jar),
):
    """
    Verify a signed cookie.
    When it was signed with a rotated secret, it is re-issued with the current one.
    """
    raw = cookies.get(name)
    if raw is None:
        raise HTTPException(status_code=404, detail="Cookie not found")

    result = jar.unsign_cookie(raw)
    if result.valid and result.renew:
        logger.info(f"Re-issuing cookie '{name}' under the current secret")
        jar.set_cookie(name, result.value, {"signed": True})
    return result


@router.put("/{name}", response_model=CookieSetResponse)
async def set_cookie(
    body: CookieSetRequest,
    name: str = Depends(valid_cookie_name),
    jar: CookieJar = Depends(get_cookie_jar),
):
    """Set a cookie, optionally signed."""
    options = {"signed": body.signed}
    if body.max_age is not None:
        options["max_age"] = body.max_age
    jar.set_cookie(name, body.value, options)
    return CookieSetResponse(name=name, signed=body.signed, headers=jar.headers())


@router.delete("/{name}", response_model=CookieSetResponse)
async def clear_cookie(
    name: str = Depends(valid_cookie_name),
    jar: CookieJar = Depends(get_cookie_jar),
):
    """Clear a cookie."""
    jar.clear_cookie(name)
    return CookieSetResponse(name=name, headers=jar.headers())
