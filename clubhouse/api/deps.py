# clubhouse/api/deps.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from clubhouse import crud
from clubhouse.core.config import settings
from clubhouse.schemas.token import Identity, TokenPayload
from clubhouse.schemas.user import UserProfile
from clubhouse.store import DocumentStore


def get_store(request: Request) -> DocumentStore:
    """The document store built by the application lifespan."""
    return request.app.state.store


# Tokens are issued by the identity provider; `tokenUrl` only feeds the OpenAPI docs
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")


def _decode(token: str) -> TokenPayload:
    payload = jwt.decode(
        token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM]
    )
    return TokenPayload(**payload)


def get_current_user(token: str = Depends(oauth2_scheme)) -> TokenPayload:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        return _decode(token)
    except (JWTError, ValueError):
        # Catches any error from jose or Pydantic validation
        raise credentials_exception


def get_current_identity(
    current_user: TokenPayload = Depends(get_current_user),
) -> Identity:
    return Identity(
        id=current_user.sub,
        display_name=current_user.name,
        photo_url=current_user.picture,
    )


def get_current_member(
    identity: Identity = Depends(get_current_identity),
    store: DocumentStore = Depends(get_store),
) -> UserProfile:
    """The signed-in member's profile, provisioned on first use."""
    return crud.user.ensure_user(store, identity=identity)

