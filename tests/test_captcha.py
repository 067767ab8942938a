from __future__ import annotations

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest
import respx

from app.services.captcha import RecaptchaVerifier
from server.config import Settings

VERIFY_URL = "https://www.google.com/recaptcha/api/siteverify"


def make_verifier(secret: str | None = "captcha-secret", min_score: float = 0.5) -> RecaptchaVerifier:
    return RecaptchaVerifier(Settings(recaptcha_secret_key=secret, recaptcha_min_score=min_score))


def test_disabled_without_secret() -> None:
    verifier = make_verifier(secret=None)
    assert verifier.is_enabled() is False
    with pytest.raises(RuntimeError):
        asyncio.run(verifier.verify("token"))


@respx.mock
def test_verify_success_with_score() -> None:
    route = respx.post(VERIFY_URL).mock(
        return_value=httpx.Response(
            200, json={"success": True, "score": 0.9, "action": "contact", "hostname": "dmtours.lk"}
        )
    )
    verifier = make_verifier()

    result = asyncio.run(verifier.verify("token-123", remote_ip="203.0.113.9"))

    form = parse_qs(route.calls.last.request.content.decode())
    assert form == {"secret": ["captcha-secret"], "response": ["token-123"], "remoteip": ["203.0.113.9"]}
    assert result.success is True
    assert result.score == 0.9
    assert verifier.passes(result)


@respx.mock
def test_low_score_does_not_pass() -> None:
    respx.post(VERIFY_URL).mock(return_value=httpx.Response(200, json={"success": True, "score": 0.2}))
    verifier = make_verifier()

    result = asyncio.run(verifier.verify("token"))

    assert result.success is True
    assert verifier.passes(result) is False


@respx.mock
def test_failed_verification_keeps_error_codes() -> None:
    respx.post(VERIFY_URL).mock(
        return_value=httpx.Response(200, json={"success": False, "error-codes": ["invalid-input-response"]})
    )
    verifier = make_verifier()

    result = asyncio.run(verifier.verify("bad"))

    assert result.success is False
    assert result.error_codes == ["invalid-input-response"]
    assert verifier.passes(result) is False


@respx.mock
def test_transport_error_is_a_failed_verification() -> None:
    respx.post(VERIFY_URL).mock(side_effect=httpx.ConnectError("unreachable"))
    verifier = make_verifier()

    result = asyncio.run(verifier.verify("token"))

    assert result.success is False
    assert result.error_codes == ["verification-unavailable"]
