"""Google reCAPTCHA verification for public form endpoints."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from app.types import CaptchaResult
from server.config import Settings, get_settings

logger = logging.getLogger("formrelay.captcha")


class RecaptchaVerifier:
    """Verify reCAPTCHA tokens against the `siteverify` endpoint."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.secret_key = settings.recaptcha_secret_key
        self.verify_url = settings.recaptcha_verify_url
        self.min_score = settings.recaptcha_min_score

    def is_enabled(self) -> bool:
        return bool(self.secret_key)

    async def verify(self, token: str, remote_ip: Optional[str] = None) -> CaptchaResult:
        """Verify a token.

        Transport and HTTP errors are reported as a failed verification with
        the `verification-unavailable` error code.
        """
        if not self.secret_key:
            raise RuntimeError("Missing RECAPTCHA_SECRET_KEY environment variable")

        data = {"secret": self.secret_key, "response": token}
        if remote_ip:
            data["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(timeout=10) as client:
                response = await client.post(self.verify_url, data=data)
                response.raise_for_status()
                body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"reCAPTCHA verification request failed: {e}")
            return CaptchaResult(success=False, error_codes=["verification-unavailable"])

        if not isinstance(body, dict):
            body = {}
        return CaptchaResult(
            success=bool(body.get("success")),
            score=body.get("score"),
            action=body.get("action"),
            hostname=body.get("hostname"),
            error_codes=list(body.get("error-codes") or []),
        )

    def passes(self, result: CaptchaResult) -> bool:
        """Accept successful verifications whose score (if any) meets the minimum."""
        if not result.success:
            return False
        return result.score is None or result.score >= self.min_score
