import logging
from decimal import Decimal
from typing import Any

from domain.catalog import (
    COUNTRIES,
    COVER_OPTIONS,
    FINISH_OPTIONS,
    OPTIONS_BY_KIND,
    PAPER_OPTIONS,
    find_option,
    option_name,
)
from domain.models import OrderConfiguration, ShippingAddress
from domain.orders import OrderError, OrdersClient
from domain.pricing import format_price, to_minor_units, total_price
from domain.session import BearerCredential


logger = logging.getLogger(__name__)


FIRST_STEP = 1
TOTAL_STEPS = 5
STEP_LABELS = ("Couverture", "Papier", "Finition", "Livraison", "Payer")
CURRENCY = "eur"

SHIPPING_FIELDS = ("name", "line1", "line2", "city", "postal_code", "country")


def can_proceed(
    step: int,
    config: OrderConfiguration,
    shipping: ShippingAddress,
) -> bool:
    """Whether the given step is complete enough to move past it."""
    if step == 1:
        return config.cover_type is not None
    if step == 2:
        return config.paper_type is not None
    if step == 3:
        return config.finish_type is not None
    if step == 4:
        return shipping.is_valid
    return True


class OrderWizard:
    """Cover, paper, finish, shipping, then review and pay.

    Only moves forward when the current step is complete. Going back keeps
    everything that was picked. Submitting hands back the checkout url; a
    failed submission leaves the wizard on the review step with `error` set.
    """

    def __init__(
        self,
        *,
        orders: OrdersClient,
        credential: BearerCredential,
        currency: str = CURRENCY,
    ) -> None:
        self.orders = orders
        self.credential = credential
        self.currency = currency
        self.step = FIRST_STEP
        self.config = OrderConfiguration()
        self.shipping = ShippingAddress()
        self.error: str | None = None
        self.submitting = False

    def __repr__(self) -> str:
        return f"<OrderWizard(step={self.step}, config={self.config!r})>"

    def select(self, kind: str, option_id: str) -> None:
        options = OPTIONS_BY_KIND.get(kind)
        if options is None:
            raise ValueError(f"Unknown option kind: {kind}")
        if find_option(options, option_id) is None:
            raise ValueError(f"Unknown {kind} option: {option_id}")
        setattr(self.config, f"{kind}_type", option_id)

    def set_quantity(self, quantity: int) -> None:
        self.config.quantity = quantity

    def update_shipping(self, **fields: str) -> None:
        unknown = set(fields) - set(SHIPPING_FIELDS)
        if unknown:
            raise ValueError(f"Unknown shipping fields: {sorted(unknown)}")
        country = fields.get("country")
        if country is not None and country not in COUNTRIES:
            raise ValueError(f"Unsupported country: {country}")
        for name, value in fields.items():
            setattr(self.shipping, name, value)

    @property
    def can_proceed(self) -> bool:
        return can_proceed(self.step, self.config, self.shipping)

    @property
    def is_complete(self) -> bool:
        return all(
            can_proceed(step, self.config, self.shipping)
            for step in range(FIRST_STEP, TOTAL_STEPS)
        )

    @property
    def can_submit(self) -> bool:
        return self.step == TOTAL_STEPS and self.is_complete and not self.submitting

    def next(self) -> bool:
        if self.step >= TOTAL_STEPS or not self.can_proceed:
            return False
        self.step += 1
        return True

    def back(self) -> bool:
        if self.step <= FIRST_STEP:
            return False
        self.step -= 1
        return True

    @property
    def total_price(self) -> Decimal:
        return total_price(self.config)

    @property
    def formatted_total_price(self) -> str:
        return format_price(self.total_price, self.currency)

    def summary(self) -> list[tuple[str, str]]:
        return [
            ("Couverture", option_name(COVER_OPTIONS, self.config.cover_type)),
            ("Papier", option_name(PAPER_OPTIONS, self.config.paper_type)),
            ("Finition", option_name(FINISH_OPTIONS, self.config.finish_type)),
            ("Quantité", str(self.config.quantity)),
            (
                "Livraison",
                f"{self.shipping.name}, {self.shipping.city} ({self.shipping.country})",
            ),
        ]

    def payload(self) -> dict[str, Any]:
        return {
            "amountTotal": to_minor_units(self.total_price),
            "currency": self.currency,
            "quantity": self.config.quantity,
            "printOptions": self.config.to_dict(),
            "shippingAddress": self.shipping.to_dict(),
        }

    async def submit(self) -> str | None:
        """Create the order. Returns the checkout url, or None if nothing to follow."""
        if self.submitting:
            logger.info("Order already being submitted, ignoring.")
            return None
        if not self.can_submit:
            logger.warning("Order submitted before the wizard was complete: %r", self)
            return None

        self.submitting = True
        self.error = None
        logger.info("Submitting order for %s", self.formatted_total_price)
        try:
            url = await self.orders.create(self.payload(), credential=self.credential)
        except OrderError as e:
            logger.error("Order creation failed: %s", e.message)
            self.error = e.message
            return None
        finally:
            self.submitting = False

        logger.info("Order created, checkout at %s", url)
        return url
