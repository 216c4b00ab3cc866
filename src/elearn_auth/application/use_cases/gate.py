from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from ...domain.clock import utc_now
from ...domain.constants import BEARER_PREFIX, GateDecision
from ...domain.entities import Principal, RequestContext
from ..route_classifier import RouteClassifier
from .validate import ValidateTokenUseCase

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Return the token from an `Authorization` header value, or None when the
    header is missing, does not start with exactly "Bearer ", or is empty
    after the prefix.
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


@dataclass(slots=True)
class AuthenticationGate:
    """
    Per-request authentication.

        START -> CLASSIFY -> PUBLIC_PASSTHROUGH
                          -> EXTRACT_TOKEN -> VALIDATED | REJECTED
              -> FORWARD

    The gate is deliberately permissive: it never rejects a request on its
    own. A missing, malformed, tampered or expired token only means that no
    principal is attached; the per-route role check downstream is what turns
    that into a 401/403. The gate touches nothing but the RequestContext it
    is handed.
    """

    classifier: RouteClassifier
    validator: ValidateTokenUseCase
    clock: Callable[[], datetime] = field(default=utc_now)

    def process(
        self,
        context: RequestContext,
        authorization: Optional[str],
        now: Optional[datetime] = None,
    ) -> GateDecision:
        path = context.path

        # CLASSIFY
        if self.classifier.is_public(path, context.method):
            logger.debug("Skipping token processing for public endpoint: %s %s",
                         context.method, path)
            return GateDecision.PUBLIC_PASSTHROUGH

        # EXTRACT_TOKEN
        token = extract_bearer_token(authorization)
        if token is None:
            logger.debug("No valid Authorization header for path: %s", path)
            return GateDecision.NO_CREDENTIALS

        if context.principal is not None:
            return GateDecision.ALREADY_AUTHENTICATED

        principal = self._validate(token, path, now)
        if principal is None:
            return GateDecision.REJECTED

        # VALIDATED
        if not context.attach(principal):
            return GateDecision.ALREADY_AUTHENTICATED
        logger.debug("Authenticated user: %s with role: %s for path: %s",
                     principal.subject, principal.role.value, path)
        return GateDecision.VALIDATED

    def _validate(
        self,
        token: str,
        path: str,
        now: Optional[datetime],
    ) -> Optional[Principal]:
        try:
            result = self.validator.execute(token, now or self.clock())
        except Exception as exc:  # noqa: BLE001
            # token errors must never break the request pipeline
            logger.warning("Token processing error for path: %s: %s", path, exc)
            return None

        if not result.valid:
            logger.warning("Rejected token (%s) for path: %s", result.reason, path)
            return None
        return result.to_principal()
