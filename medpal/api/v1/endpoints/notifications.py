from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from medpal.api import deps
from medpal.container import Services
from medpal.reminders.dispatcher import parse_request
from medpal.schemas.auth import IdentityClaim
from medpal.schemas.notifications import NotificationResponse

router = APIRouter()


@router.post("", response_model=NotificationResponse)
async def send_notification(
    payload: Dict[str, Any] = Body(...),
    claim: IdentityClaim = Depends(deps.get_current_claim),
    services: Services = Depends(deps.get_services),
) -> Any:
    """
    Send a reminder to the authenticated user.

    ``success`` only says the request was processed; each entry in
    ``result`` carries the outcome of one channel.
    """
    request = parse_request(
        {
            "recipient": {"name": claim.name, "email": claim.email, "phone": claim.phone},
            "type": payload.get("type"),
            "channel": payload.get("channel", "both"),
            "data": payload.get("data") or {},
        }
    )
    results = await services.dispatcher.dispatch(request)
    return NotificationResponse(result=results)
