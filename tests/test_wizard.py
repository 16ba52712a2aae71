import asyncio
import json
from decimal import Decimal
from typing import Callable

import httpx
import pytest

from domain.models import OrderConfiguration, ShippingAddress
from domain.orders import OrdersClient
from domain.session import Session
from domain.wizard import OrderWizard, can_proceed


ADDRESS = {
    "name": "Alice",
    "line1": "10 rue de la Paix",
    "city": "Paris",
    "postal_code": "75001",
}


def checkout(request: httpx.Request) -> httpx.Response:
    return httpx.Response(201, json={"checkoutUrl": "https://pay.example/abc"})


def make_wizard(handler: Callable = checkout) -> OrderWizard:
    client = httpx.AsyncClient(
        base_url="https://api.test",
        transport=httpx.MockTransport(handler),
    )
    return OrderWizard(orders=OrdersClient(client=client), credential=Session("tok"))


def fill(wizard: OrderWizard) -> OrderWizard:
    wizard.select("cover", "hardcover")
    assert wizard.next()
    wizard.select("paper", "premium_silk")
    assert wizard.next()
    wizard.select("finish", "glossy")
    assert wizard.next()
    wizard.update_shipping(**ADDRESS)
    assert wizard.next()
    assert wizard.step == 5
    return wizard


@pytest.mark.parametrize(
    "step,field,value",
    (
        (1, "cover_type", "softcover"),
        (2, "paper_type", "standard_matte"),
        (3, "finish_type", "matte"),
    ),
)
def test_can_proceed_option_steps(step: int, field: str, value: str) -> None:
    config = OrderConfiguration()
    assert not can_proceed(step, config, ShippingAddress())
    setattr(config, field, value)
    assert can_proceed(step, config, ShippingAddress())


@pytest.mark.parametrize(
    "override",
    (
        {"name": "Al"},
        {"line1": "10 rue"},
        {"city": "Pa"},
        {"postal_code": "7500"},
    ),
)
def test_can_proceed_shipping_each_field(override: dict[str, str]) -> None:
    good = ShippingAddress(**ADDRESS)
    assert can_proceed(4, OrderConfiguration(), good)
    bad = ShippingAddress(**(ADDRESS | override))
    assert not can_proceed(4, OrderConfiguration(), bad)


def test_review_step_always_proceeds() -> None:
    assert can_proceed(5, OrderConfiguration(), ShippingAddress())


def test_initial_state() -> None:
    wizard = make_wizard()
    assert wizard.step == 1
    assert wizard.config == OrderConfiguration()
    assert wizard.shipping == ShippingAddress()
    assert wizard.shipping.country == "FR"
    assert wizard.config.format == "A5"


def test_next_blocked_until_selected() -> None:
    wizard = make_wizard()
    assert not wizard.next()
    assert wizard.step == 1
    wizard.select("cover", "hardcover")
    assert wizard.next()
    assert wizard.step == 2


def test_back_is_unconditional_but_stops_at_first_step() -> None:
    wizard = make_wizard()
    assert not wizard.back()
    wizard.select("cover", "softcover")
    wizard.next()
    assert wizard.back()
    assert wizard.step == 1


def test_back_then_forward_keeps_everything() -> None:
    wizard = fill(make_wizard())
    before = (wizard.config.to_dict(), wizard.shipping.to_dict())
    while wizard.back():
        pass
    assert wizard.step == 1
    while wizard.next():
        pass
    assert wizard.step == 5
    assert (wizard.config.to_dict(), wizard.shipping.to_dict()) == before


def test_next_does_not_go_past_review() -> None:
    wizard = fill(make_wizard())
    assert not wizard.next()
    assert wizard.step == 5


def test_reselect_is_idempotent() -> None:
    wizard = make_wizard()
    wizard.select("cover", "hardcover")
    first = (wizard.config.to_dict(), wizard.total_price)
    wizard.select("cover", "hardcover")
    assert (wizard.config.to_dict(), wizard.total_price) == first


def test_select_unknown_option() -> None:
    wizard = make_wizard()
    with pytest.raises(ValueError):
        wizard.select("cover", "leather")
    with pytest.raises(ValueError):
        wizard.select("binding", "spiral")
    assert wizard.config.cover_type is None


def test_quantity_stays_positive() -> None:
    wizard = make_wizard()
    with pytest.raises(ValueError):
        wizard.set_quantity(0)
    assert wizard.config.quantity == 1


def test_shipping_rejects_unknown_country() -> None:
    wizard = make_wizard()
    with pytest.raises(ValueError):
        wizard.update_shipping(name="Alice", country="US")
    assert wizard.shipping.name == ""


def test_scenario_hardcover_silk_two_copies() -> None:
    wizard = make_wizard()
    wizard.select("cover", "hardcover")
    wizard.select("paper", "premium_silk")
    wizard.set_quantity(2)
    assert wizard.total_price == Decimal(60)
    assert wizard.formatted_total_price == "60,00\u00a0€"


def test_scenario_softcover_standard() -> None:
    wizard = make_wizard()
    wizard.select("cover", "softcover")
    wizard.select("paper", "standard_matte")
    assert wizard.total_price == Decimal(15)


def test_summary_names_choices() -> None:
    wizard = fill(make_wizard())
    summary = dict(wizard.summary())
    assert summary["Couverture"] == "Couverture Rigide"
    assert summary["Finition"] == "Lamination Brillante"
    assert summary["Livraison"] == "Alice, Paris (FR)"


@pytest.mark.asyncio
async def test_submit_payload_and_checkout() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return checkout(request)

    wizard = fill(make_wizard(handler))
    wizard.set_quantity(2)
    url = await wizard.submit()

    assert url == "https://pay.example/abc"
    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/orders"
    assert request.headers["authorization"] == "Bearer tok"
    body = json.loads(request.content)
    assert body == {
        "amountTotal": 6000,
        "currency": "eur",
        "quantity": 2,
        "printOptions": {
            "coverType": "hardcover",
            "paperType": "premium_silk",
            "finishType": "glossy",
            "quantity": 2,
            "format": "A5",
        },
        "shippingAddress": {
            "name": "Alice",
            "line1": "10 rue de la Paix",
            "line2": "",
            "city": "Paris",
            "postalCode": "75001",
            "country": "FR",
        },
    }


@pytest.mark.asyncio
async def test_submit_server_error_keeps_review_open() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"message": "Erreur interne"})

    wizard = fill(make_wizard(handler))
    assert await wizard.submit() is None
    assert wizard.error == "Erreur interne"
    assert wizard.step == 5
    assert not wizard.submitting
    assert wizard.can_submit


@pytest.mark.asyncio
async def test_resubmit_clears_error() -> None:
    responses = [
        httpx.Response(400, json={"message": ["quantity must be positive"]}),
        httpx.Response(201, json={"checkoutUrl": "https://pay.example/abc"}),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    wizard = fill(make_wizard(handler))
    assert await wizard.submit() is None
    assert wizard.error == "quantity must be positive"
    assert await wizard.submit() == "https://pay.example/abc"
    assert wizard.error is None


@pytest.mark.asyncio
async def test_submit_missing_checkout_url_is_an_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(201, json={"id": "ord_1"})

    wizard = fill(make_wizard(handler))
    assert await wizard.submit() is None
    assert wizard.error == "Lien de paiement indisponible"


@pytest.mark.asyncio
async def test_submit_incomplete_wizard_makes_no_call() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return checkout(request)

    wizard = make_wizard(handler)
    wizard.select("cover", "hardcover")
    assert await wizard.submit() is None
    assert seen == []


@pytest.mark.asyncio
async def test_double_submit_makes_one_call() -> None:
    seen: list[httpx.Request] = []
    started = asyncio.Event()
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        started.set()
        await release.wait()
        return checkout(request)

    wizard = fill(make_wizard(handler))
    first = asyncio.create_task(wizard.submit())
    await started.wait()

    assert wizard.submitting
    assert not wizard.can_submit
    assert await wizard.submit() is None

    release.set()
    assert await first == "https://pay.example/abc"
    assert len(seen) == 1
