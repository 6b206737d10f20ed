from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class TokenMeta(BaseModel):
    """
    Display metadata for a token, as served by the explorer's token endpoint.

    name / symbol:
      human-readable token identity

    logo_url:
      image URL (the service calls it logoURI); None when the token has no logo
    """

    name: str
    symbol: str
    logo_url: Optional[str] = None
