from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from medpal.container import Services
from medpal.core.security import extract_bearer_token
from medpal.schemas.auth import IdentityClaim


def get_services(request: Request) -> Services:
    return request.app.state.services


def get_current_claim(
    authorization: Optional[str] = Header(default=None),
    services: Services = Depends(get_services),
) -> IdentityClaim:
    token = extract_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    claim = services.auth.authenticate(token)
    if claim is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return claim
