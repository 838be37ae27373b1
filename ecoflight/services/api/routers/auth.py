import logging
from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer

from ecoflight.services.api.core.config import settings
from ecoflight.services.api.core.fourfly import get_fourfly
from ecoflight.services.api.schemas.auth import LoginIn, LoginOut, MeOut, TokenRelayIn, TokenRelayOut
from ecoflight.services.fourfly.client import FourFlyClient, mask_token
from ecoflight.services.fourfly.errors import (
    AuthenticationError,
    AuthorizationError,
    FourFlyError,
    NoClubError,
)
from ecoflight.services.fourfly.models import ClubScope

logger = logging.getLogger(__name__)

router = APIRouter()
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def raise_http(e: FourFlyError) -> NoReturn:
    """Map upstream 4Fly failures onto HTTP errors."""
    if isinstance(e, AuthenticationError):
        raise HTTPException(status_code=401, detail="Token invalide") from e
    if isinstance(e, NoClubError):
        raise HTTPException(status_code=403, detail="Utilisateur sans club actif") from e
    if isinstance(e, AuthorizationError):
        raise HTTPException(status_code=403, detail="Accès refusé par 4Fly") from e
    logger.error("4Fly upstream error: %s", e)
    raise HTTPException(status_code=502, detail="Erreur 4Fly") from e


async def get_current_scope(
    token: Annotated[str, Depends(oauth2_scheme)],
    fourfly: Annotated[FourFlyClient, Depends(get_fourfly)],
) -> ClubScope:
    try:
        return await fourfly.resolve_scope(token)
    except FourFlyError as e:
        raise_http(e)


@router.post("/login", response_model=LoginOut)
async def login(data: LoginIn, fourfly: Annotated[FourFlyClient, Depends(get_fourfly)]):
    if not data.email or not data.password:
        raise HTTPException(status_code=400, detail="Email et mot de passe requis")

    logger.info("Login attempt for %s", data.email)
    try:
        result = await fourfly.sign_in(data.email, data.password)
    except AuthenticationError as e:
        logger.info("Login failed for %s: %s", data.email, e)
        raise HTTPException(status_code=401, detail=str(e)) from e
    except FourFlyError as e:
        raise_http(e)

    return LoginOut(success=True, token=result.access_token, user=result.user)


@router.post("/4fly-login", response_model=TokenRelayOut)
async def fourfly_login(data: TokenRelayIn, fourfly: Annotated[FourFlyClient, Depends(get_fourfly)]):
    """Token relayed by the 4Fly host app after its own sign-in."""
    if not data.token:
        raise HTTPException(status_code=400, detail="token requis")

    reason = data.reason or "login"
    logger.info("Token received | reason=%s club=%s token=%s", reason, data.club_id or "N/A", mask_token(data.token))

    try:
        user = await fourfly.get_user(data.token)
        if data.club_id:
            try:
                scope = await fourfly.resolve_scope(data.token)
            except NoClubError:
                scope = None
            if scope is None or not await fourfly.is_app_installed(scope, settings.APP_ID):
                raise HTTPException(status_code=403, detail="App non installée pour ce club")
    except FourFlyError as e:
        raise_http(e)

    logger.info("Auth OK | user=%s club=%s reason=%s", user.get("email") or user.get("id"), data.club_id or "N/A", reason)
    return TokenRelayOut(success=True, reason=reason)


@router.get("/me", response_model=MeOut)
async def me(scope: Annotated[ClubScope, Depends(get_current_scope)]):
    return MeOut(**scope.to_public_dict())


@router.post("/logout")
async def logout(
    token: Annotated[str, Depends(oauth2_scheme)],
    fourfly: Annotated[FourFlyClient, Depends(get_fourfly)],
):
    try:
        await fourfly.sign_out(token)
    except FourFlyError as e:
        raise_http(e)
    return {"success": True}
