import logging

from authlib.integrations.starlette_client import OAuth, OAuthError
from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from joserfc.errors import JoseError

from app.api.dependencies import get_oauth_client, get_settings, get_storage
from app.core.config import Settings
from app.schemas.auth_schemas import AuthProvider, AuthStatus, MessageResponse
from app.services import auth_service
from app.storage.base import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


def _start_session(request: Request, user_id: int) -> None:
    request.session.clear()
    request.session["user_id"] = user_id


@router.get("/status", response_model=AuthStatus, summary="Current authentication state")
async def auth_status(request: Request, storage: Storage = Depends(get_storage)):
    user_id = request.session.get("user_id")
    user = storage.get_user(user_id) if user_id else None
    if not user:
        return AuthStatus(authenticated=False)
    return AuthStatus(authenticated=True, user=user)


@router.post("/logout", response_model=MessageResponse, summary="Log out the current user")
async def logout(request: Request):
    """
    Clears the current user's session, effectively logging them out.
    """
    request.session.clear()
    return MessageResponse(message="Logged out successfully")


@router.get("/login/{provider}", summary="Initiate OAuth2 login")
async def login(
    request: Request,
    provider: AuthProvider = Path(..., description="OAuth provider to sign in with"),
    oauth_client: OAuth = Depends(get_oauth_client),
):
    """
    Redirects the user to the provider's authorization page. Authlib keeps the
    CSRF state in the session; the provider redirects back to the callback below.
    """
    redirect_uri = request.url_for("auth_callback", provider=provider.value)
    client = oauth_client.create_client(provider.value)
    return await client.authorize_redirect(request, redirect_uri)


@router.get("/{provider}/callback", name="auth_callback", response_model=AuthStatus, summary="Handle OAuth2 callback")
async def auth_callback(
    request: Request,
    provider: AuthProvider,
    oauth_client: OAuth = Depends(get_oauth_client),
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """
    Exchanges the authorization code for tokens, finds or creates the local
    user for the returned identity and starts a session for them.
    """
    client = oauth_client.create_client(provider.value)
    try:
        token = await client.authorize_access_token(
            request, claims_options=auth_service.id_token_claims_options(provider)
        )
    except (OAuthError, JoseError) as e:  # provider refused, or the ID token failed validation
        logger.warning(f"{provider.value} login failed: {e.error}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Could not authorize access token: {e.error}")

    user_info = token.get("userinfo")
    if not user_info:
        user_info = await client.userinfo(token=token)

    try:
        user = auth_service.login_user_from_userinfo(storage, provider, dict(user_info), settings)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    _start_session(request, user.id)
    logger.info(f"User {user.id} logged in via {provider.value}")
    return AuthStatus(authenticated=True, user=user)


@router.post("/mock-login/{provider}", response_model=AuthStatus, summary="Log in as a demo user")
async def mock_login(
    request: Request,
    provider: AuthProvider,
    storage: Storage = Depends(get_storage),
    settings: Settings = Depends(get_settings),
):
    """
    Development-only login: signs in as the demo user for the given provider
    (google is an admin, microsoft is a regular member) without contacting it.
    """
    if not settings.MOCK_LOGIN_ENABLED:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    user = auth_service.login_mock_user(storage, provider)
    _start_session(request, user.id)
    logger.info(f"User {user.id} logged in via mock {provider.value}")
    return AuthStatus(authenticated=True, user=user)
