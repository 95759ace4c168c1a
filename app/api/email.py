from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.api.schemas import SendEmailRequestSchema
from app.application.exceptions import RemoteError, ValidationError
from app.application.use_cases.send_email import SendEmailUseCase
from app.wiring.dependencies import get_send_email_use_case


router = APIRouter()


@router.post("/api/email/send")
def send_email(
    req: SendEmailRequestSchema,
    uc: SendEmailUseCase = Depends(get_send_email_use_case),
) -> dict[str, bool]:
    try:
        uc.execute(to=req.to, subject=req.subject, html=req.html, booking_id=req.booking_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RemoteError:
        raise HTTPException(status_code=500, detail="Failed to send email")
    return {"success": True}
