from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from app.services.captcha import RecaptchaVerifier
from app.services.whatsapp_session import WhatsAppSession, get_whatsapp_session
from app.types import ContactFormSubmission, FormResponse, FormSubmission, LeadSubmission
from app.utils import normalize_phone_number
from app.utils.formatting import format_contact_form_message, format_lead_message, utc_now_iso
from server.config import Settings, get_settings

logger = logging.getLogger("formrelay.forms")

router = APIRouter(prefix="/dm-tors", tags=["forms"])


def get_captcha_verifier(settings: Settings = Depends(get_settings)) -> RecaptchaVerifier:
    return RecaptchaVerifier(settings)


def staff_recipients(settings: Settings) -> List[str]:
    """Normalized numbers of the staff who receive form notifications.

    Entries that do not normalize to a number are logged and skipped.
    """
    recipients: List[str] = []
    for number in settings.notify_recipients:
        try:
            recipients.append(normalize_phone_number(number, settings.default_country_code))
        except ValueError:
            logger.warning("Skipping invalid NOTIFY_RECIPIENTS entry", extra={"entry": number})
    return recipients


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _log_submission(kind: str, submission: FormSubmission, request: Request) -> None:
    logger.info(
        f"{kind} submission received",
        extra={
            "origin": request.headers.get("origin"),
            "client_ip": submission.ip_address or _client_ip(request),
            "submitted_name": submission.name,
            "submitted_email": submission.email,
            "recaptcha_token": submission.token_hint(),
        },
    )
    logger.debug(f"{kind} full data: {submission.public_data()}")


async def enforce_captcha(
    submission: FormSubmission, request: Request, verifier: RecaptchaVerifier
) -> None:
    """Reject the submission before any delivery when reCAPTCHA is enabled and fails."""
    if not verifier.is_enabled():
        return
    if not submission.recaptcha_token:
        raise HTTPException(status_code=400, detail="reCAPTCHA token is required")

    result = await verifier.verify(submission.recaptcha_token, remote_ip=_client_ip(request))
    if not verifier.passes(result):
        logger.warning(
            "reCAPTCHA verification failed",
            extra={"score": result.score, "error_codes": result.error_codes},
        )
        raise HTTPException(status_code=400, detail="reCAPTCHA verification failed")


@router.post("/contactform")
async def submit_contact_form(
    submission: ContactFormSubmission,
    request: Request,
    settings: Settings = Depends(get_settings),
    session: WhatsAppSession = Depends(get_whatsapp_session),
    verifier: RecaptchaVerifier = Depends(get_captcha_verifier),
) -> FormResponse:
    timestamp = utc_now_iso()
    _log_submission("Contact form", submission, request)
    await enforce_captcha(submission, request, verifier)

    report = await session.notify(staff_recipients(settings), format_contact_form_message(submission))

    return FormResponse(
        message="Contact form submitted successfully",
        timestamp=timestamp,
        data=submission.public_data(),
        notification=report,
    )


@router.post("/lead")
async def submit_lead(
    submission: LeadSubmission,
    request: Request,
    settings: Settings = Depends(get_settings),
    session: WhatsAppSession = Depends(get_whatsapp_session),
    verifier: RecaptchaVerifier = Depends(get_captcha_verifier),
) -> FormResponse:
    if not submission.name or not submission.email:
        raise HTTPException(status_code=400, detail="Name and email are required fields")

    timestamp = utc_now_iso()
    _log_submission("Lead", submission, request)
    await enforce_captcha(submission, request, verifier)

    report = await session.notify(staff_recipients(settings), format_lead_message(submission))

    return FormResponse(
        message="Lead submitted successfully",
        timestamp=timestamp,
        data={
            "name": submission.name,
            "email": submission.email,
            "phone": submission.phone,
            "source": submission.source,
            "interest": submission.interest,
            "submittedAt": timestamp,
        },
        notification=report,
    )
