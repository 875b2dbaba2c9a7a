# clubhouse/schemas/token.py
from typing import Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    """Claims we rely on from the identity provider's token."""

    sub: str
    name: Optional[str] = None
    picture: Optional[str] = None
    exp: Optional[int] = None


class Identity(BaseModel):
    """The authenticated member as the identity provider knows them."""

    id: str
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
