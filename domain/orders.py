import logging
from typing import Any

import httpx

from domain.models import Order
from domain.session import BearerCredential


logger = logging.getLogger(__name__)


TIMEOUT = 20
GENERIC_ERROR = "Erreur lors de la commande"
MISSING_CHECKOUT_ERROR = "Lien de paiement indisponible"


class OrderError(Exception):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def orders_client_factory(base_url: str, timeout: float = TIMEOUT) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url,
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )


def error_message(resp: httpx.Response) -> str:
    """The server's own message if it sent one we can show."""
    try:
        data = resp.json()
    except ValueError:
        return GENERIC_ERROR
    if not isinstance(data, dict):
        return GENERIC_ERROR
    message = data.get("message")
    if isinstance(message, list):
        message = message[0] if message else None
    if isinstance(message, str) and message:
        return message
    return GENERIC_ERROR


def auth_headers(credential: BearerCredential) -> dict[str, str]:
    token = credential.bearer_token
    return {"Authorization": f"Bearer {token}"} if token else {}


class OrdersClient:
    """Talks to the orders endpoints of the backend api."""

    def __init__(
        self,
        *,
        base_url: str = "",
        client: httpx.AsyncClient | None = None,
        timeout: float = TIMEOUT,
    ) -> None:
        self.client = (
            orders_client_factory(base_url, timeout=timeout) if client is None else client
        )

    async def create(
        self,
        payload: dict[str, Any],
        *,
        credential: BearerCredential,
    ) -> str:
        """Create the order and return the checkout url to send the user to."""
        try:
            resp = await self.client.post(
                "/orders", json=payload, headers=auth_headers(credential)
            )
        except httpx.HTTPError as e:
            logger.warning("Orders api unreachable: %r", e)
            raise OrderError(GENERIC_ERROR) from e

        if not resp.is_success:
            raise OrderError(error_message(resp), status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise OrderError(GENERIC_ERROR, status_code=resp.status_code) from e

        url = data.get("checkoutUrl") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            raise OrderError(MISSING_CHECKOUT_ERROR, status_code=resp.status_code)
        return url

    async def list(self, *, credential: BearerCredential) -> list[Order]:
        try:
            resp = await self.client.get("/orders", headers=auth_headers(credential))
        except httpx.HTTPError as e:
            logger.warning("Orders api unreachable: %r", e)
            raise OrderError(GENERIC_ERROR) from e

        logger.info("Orders listed with status %s", resp.status_code)
        if not resp.is_success:
            raise OrderError(error_message(resp), status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise OrderError(GENERIC_ERROR, status_code=resp.status_code) from e
        if not isinstance(data, list):
            raise OrderError(GENERIC_ERROR, status_code=resp.status_code)
        orders: list[Order] = []
        for item in data:
            try:
                orders.append(Order.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                # One bad order should not hide the others.
                logger.error("Skipping malformed order %r: %r", item, e)
        return orders

    async def aclose(self) -> None:
        await self.client.aclose()
