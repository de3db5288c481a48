import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status

from medpal.api import deps
from medpal.container import Services
from medpal.core.exceptions import ValidationError
from medpal.schemas.auth import AuthResponse, AuthResult, IdentityClaim, OtpSendResponse
from medpal.schemas.user import UserPublic

logger = logging.getLogger(__name__)

router = APIRouter()


def _auth_response(result: AuthResult, **extra: Any) -> AuthResponse:
    return AuthResponse(user=UserPublic.model_validate(result.user), token=result.token, **extra)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: Dict[str, Any] = Body(...),
    services: Services = Depends(deps.get_services),
) -> Any:
    """
    Create a new user account, return a session token and text a
    verification code to the new user's phone.

    A failed code delivery is reported in ``otp_result``; the account is
    created either way.
    """
    result = await services.auth.register(payload)
    _, otp_result = await services.otp.send_new_code(result.user.phone)
    if not otp_result.success:
        logger.warning(f"⚠️ Verification code not delivered for {result.user.email}: {otp_result.message}")
    return _auth_response(result, otp_result=otp_result)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: Dict[str, Any] = Body(...),
    services: Services = Depends(deps.get_services),
) -> Any:
    email, password = payload.get("email"), payload.get("password")
    if not isinstance(email, str) or not isinstance(password, str):
        raise ValidationError("Email and password are required")
    result = await services.auth.login(email, password)
    return _auth_response(result)


@router.post("/otp", response_model=OtpSendResponse)
async def send_otp(
    claim: IdentityClaim = Depends(deps.get_current_claim),
    services: Services = Depends(deps.get_services),
) -> Any:
    """
    Send a fresh verification code to the signed-in user's phone.

    The code itself is never returned; storing it for later checks is up to
    the verification collaborator.
    """
    _, result = await services.otp.send_new_code(claim.phone)
    return OtpSendResponse(
        success=result.success,
        result=result,
        message="Verification code sent" if result.success else "Verification code could not be sent",
    )
