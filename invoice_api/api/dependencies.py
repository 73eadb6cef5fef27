"""Request Dependencies — service injection and the authentication gate.

Invariants:
    - The gateway is read from app.state (constructed once by the lifespan)
    - Services are cheap per-request wrappers around the shared gateway
    - The auth gate runs before any route body; a rejected request never
      reaches a service

Design Decisions:
    - Static bearer tokens from settings: authentication mechanics are out of
      scope, the gate only has to allow or reject
    - No tokens configured → gate open (local development)
"""

import logging
import secrets

from fastapi import Depends, Request

from invoice_api.config import Settings, get_settings
from invoice_api.core.errors import AuthenticationError
from invoice_api.core.repository_protocols import PersistenceGateway
from invoice_api.services.customer_service import CustomerService
from invoice_api.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)


def get_gateway(request: Request) -> PersistenceGateway:
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        raise RuntimeError("Database not initialized")
    return gateway


def get_customer_service(
    gateway: PersistenceGateway = Depends(get_gateway),
) -> CustomerService:
    return CustomerService(gateway)


def get_invoice_service(
    gateway: PersistenceGateway = Depends(get_gateway),
) -> InvoiceService:
    return InvoiceService(gateway)


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def require_api_token(
    request: Request, settings: Settings = Depends(get_settings),
) -> None:
    """Allow the request or raise AuthenticationError."""
    if not settings.api_tokens:
        return
    token = _bearer_token(request)
    if token is None:
        raise AuthenticationError("No token, authorization denied")
    if not any(secrets.compare_digest(token, t) for t in settings.api_tokens):
        logger.warning(
            "Rejected request with invalid token",
            extra={"path": request.url.path},
        )
        raise AuthenticationError("Token is not valid")
