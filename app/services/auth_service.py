import logging
from typing import Any, Dict, Optional

from authlib.integrations.starlette_client import OAuth

from app.core.config import Settings
from app.models.user_model import UserModel
from app.schemas.auth_schemas import AuthProvider
from app.schemas.player_schemas import PlayerCreate
from app.schemas.user_schemas import UserCreate
from app.storage.base import Storage

logger = logging.getLogger(__name__)

GOOGLE_METADATA_URL = "https://accounts.google.com/.well-known/openid-configuration"
MICROSOFT_METADATA_URL = "https://login.microsoftonline.com/common/v2.0/.well-known/openid-configuration"
# The /common document advertises a "{tenantid}" placeholder issuer; real tokens carry their own tenant
MICROSOFT_ISSUER = "https://login.microsoftonline.com/{tid}/v2.0"

# Stand-in identities for development without real OAuth credentials
MOCK_USERS: Dict[AuthProvider, Dict[str, Any]] = {
    AuthProvider.GOOGLE: {
        "email": "alex@example.com",
        "name": "Alex Johnson",
        "picture": "https://images.unsplash.com/photo-1522529599102-193c0d76b5b6?w=128&h=128",
        "provider": "google",
        "provider_id": "google-123456",
        "is_admin": True,
    },
    AuthProvider.MICROSOFT: {
        "email": "emma@example.com",
        "name": "Emma Wilson",
        "picture": "https://images.unsplash.com/photo-1544005313-94ddf0286df2?w=128&h=128",
        "provider": "microsoft",
        "provider_id": "microsoft-123456",
        "is_admin": False,
    },
}


def create_oauth_client(settings: Settings) -> OAuth:
    oauth = OAuth()
    oauth.register(
        name=AuthProvider.GOOGLE.value,
        server_metadata_url=GOOGLE_METADATA_URL,
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        client_kwargs={"scope": "openid email profile"},
    )
    oauth.register(
        name=AuthProvider.MICROSOFT.value,
        server_metadata_url=MICROSOFT_METADATA_URL,
        client_id=settings.MICROSOFT_CLIENT_ID,
        client_secret=settings.MICROSOFT_CLIENT_SECRET,
        client_kwargs={"scope": "openid email profile"},
    )
    return oauth


def _issuer_matches_tenant(claims, value) -> bool:
    tid = claims.get("tid")
    return bool(tid) and value == MICROSOFT_ISSUER.format(tid=tid)


def id_token_claims_options(provider: AuthProvider) -> Optional[Dict[str, Any]]:
    """
    Claim checks for the provider's ID token. None keeps authlib's default
    check against the issuer in the provider metadata.
    """
    if provider == AuthProvider.MICROSOFT:
        # authlib pops the validate hook off this dict, so build a fresh one per login
        return {"iss": {"essential": True, "validate": _issuer_matches_tenant}}
    return None


def get_or_create_user(
    storage: Storage,
    email: str,
    name: Optional[str],
    provider: str,
    provider_id: str,
    picture: Optional[str] = None,
    is_admin: bool = False,
) -> UserModel:
    """
    Returns the user behind an OAuth identity, creating it on first login.
    Lookup is by provider id first, then by email. A new user also gets a
    player record so they show up on the team roster.
    """
    email = email.strip().lower()
    user = storage.get_user_by_provider_id(provider_id)
    if not user:
        user = storage.get_user_by_email(email)
    if user:
        return user

    user = storage.create_user(
        UserCreate(
            email=email,
            name=name if name else email.split("@")[0],
            picture=picture,
            provider=provider,
            provider_id=provider_id,
            is_admin=is_admin,
        )
    )
    logger.info(f"Created user {user.id} ({user.email}) via {provider}, admin={user.is_admin}")

    if not storage.get_player_by_user_id(user.id):
        player = storage.create_player(PlayerCreate(user_id=user.id))
        logger.info(f"Added user {user.id} to the roster as player {player.id}")
    return user


def login_user_from_userinfo(storage: Storage, provider: AuthProvider, user_info: Dict[str, Any], settings: Settings) -> UserModel:
    """Maps OpenID Connect claims onto get_or_create_user()."""
    email = user_info.get("email") or user_info.get("preferred_username")
    provider_id = user_info.get("sub")
    if not email or not provider_id:
        raise ValueError(f"Email or {provider.value} user ID not found in token.")

    return get_or_create_user(
        storage,
        email=email,
        name=user_info.get("name"),
        provider=provider.value,
        provider_id=f"{provider.value}-{provider_id}",
        picture=user_info.get("picture"),
        is_admin=email.lower() in {e.lower() for e in settings.ADMIN_EMAILS},
    )


def login_mock_user(storage: Storage, provider: AuthProvider) -> UserModel:
    return get_or_create_user(storage, **MOCK_USERS[provider])
