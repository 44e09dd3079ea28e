"""Webhook shared-secret verification.

This module provides a FastAPI dependency that checks incoming Airtable
webhook requests carry the configured shared secret. The webhook relay
adds the secret as the ``X-Airtable-Webhook-Secret`` header; callers that
cannot set headers may send it as ``webhookSecret`` in the JSON body.

Security: secret values are never logged, and comparison is constant-time.
"""

import hmac
import json
from typing import Optional

from fastapi import Request, HTTPException

from formbuilder.config import get_settings
from formbuilder.logging_config import get_logger


logger = get_logger(__name__)

SECRET_HEADER = "X-Airtable-Webhook-Secret"
SECRET_BODY_FIELD = "webhookSecret"


class WebhookSecretValidator:
    """Compares presented webhook secrets with the configured one."""

    def __init__(self, expected_secret: Optional[str]):
        """Initialize validator.

        Args:
            expected_secret: Configured secret, or None to disable the check
        """
        self.expected_secret = expected_secret

    @property
    def enabled(self) -> bool:
        """Whether a secret is configured."""
        return bool(self.expected_secret)

    def is_valid(self, presented: Optional[str]) -> bool:
        """Check a presented secret.

        Args:
            presented: Secret from the request, or None if absent

        Returns:
            True if the check is disabled or the secret matches
        """
        if not self.enabled:
            return True
        if not presented:
            return False
        return hmac.compare_digest(
            presented.encode("utf-8"),
            self.expected_secret.encode("utf-8"),
        )


async def _secret_from_body(request: Request) -> Optional[str]:
    try:
        body = json.loads(await request.body() or b"{}")
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get(SECRET_BODY_FIELD), str):
        return body[SECRET_BODY_FIELD]
    return None


async def verify_webhook_secret(request: Request) -> None:
    """FastAPI dependency for webhook secret verification.

    Args:
        request: FastAPI request object

    Raises:
        HTTPException(401): If a secret is configured and the request's is missing or wrong

    Usage:
        @router.post("/api/webhooks/airtable", dependencies=[Depends(verify_webhook_secret)])
        async def airtable_webhook(request: Request):
            ...
    """
    validator = WebhookSecretValidator(get_settings().webhook_secret)
    if not validator.enabled:
        return

    presented = request.headers.get(SECRET_HEADER)
    if presented is None:
        presented = await _secret_from_body(request)

    if not validator.is_valid(presented):
        client_ip = request.client.host if request.client else "unknown"
        logger.warning(
            f"Rejected webhook with {'missing' if presented is None else 'invalid'} "
            f"secret from IP: {client_ip}",
            extra={"client_ip": client_ip}
        )
        raise HTTPException(
            status_code=401,
            detail="Invalid webhook secret"
        )

    logger.debug("Webhook secret verification passed")
