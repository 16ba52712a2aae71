import contextlib
import functools
import logging
from typing import Any, Awaitable, Callable
import uuid

from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from app import config
from app.html.order_list import OrderList
from app.html.order_wizard import OrderWizardView
from app.wizards import WizardStore
from domain.orders import OrderError, OrdersClient
from domain.session import Session
from domain.wizard import OrderWizard


CONFIG = config.Config()


logging.basicConfig(level=CONFIG.log_level)
logger = logging.getLogger(__name__)


TEMPLATES = Environment(
    loader=FileSystemLoader(CONFIG.html_dir),
    autoescape=select_autoescape(),
)


def aHTMLResponse(route: Callable[..., Awaitable[str | tuple[str, int]]]):
    @functools.wraps(route)
    async def wrapper(*args: Any, **kwargs: Any) -> HTMLResponse:
        resp = await route(*args, **kwargs)
        if not isinstance(resp, tuple):
            html, code = resp, 200
        else:
            html, code = resp
        return HTMLResponse(html, status_code=code)

    return wrapper


def session_from_request(request: Request) -> Session:
    header = request.headers.get("authorization", "")
    if header.lower().startswith("bearer "):
        return Session.from_token(header[7:].strip())
    return Session.from_token(request.cookies.get(CONFIG.access_token_cookie))


def current_wizard(request: Request, *, keep: bool = True) -> tuple[str | None, OrderWizard]:
    """The wizard for this browser, a fresh one if there is none yet.

    A fresh wizard is only stored when `keep` is set, so just looking at the
    first step does not cost a slot in the store.
    """
    wizards: WizardStore = request.app.state.wizards
    session = session_from_request(request)
    key = request.cookies.get(CONFIG.wizard_cookie)
    wizard = None if key is None else wizards.get(key)
    if wizard is None:
        wizard = OrderWizard(orders=request.app.state.orders, credential=session)
        key = uuid.uuid4().hex if keep else None
        if key is not None:
            wizards.put(key, wizard)
    # Tokens get refreshed under us.
    wizard.credential = session
    return key, wizard


def with_cookie(response: Response, key: str | None) -> Response:
    if key is not None:
        response.set_cookie(CONFIG.wizard_cookie, key, httponly=True, samesite="lax")
    return response


def to_wizard() -> RedirectResponse:
    return RedirectResponse("/order", status_code=303)


def render_wizard(
    wizard: OrderWizard, key: str | None, status_code: int = 200
) -> Response:
    html = OrderWizardView(wizard, environment=TEMPLATES).render()
    return with_cookie(HTMLResponse(html, status_code=status_code), key)


async def homepage(request: Request) -> RedirectResponse:
    return to_wizard()


async def order(request: Request) -> Response:
    key, wizard = current_wizard(request, keep=False)
    return render_wizard(wizard, key)


async def select_option(request: Request) -> Response:
    key, wizard = current_wizard(request)
    async with request.form() as form:
        kind = str(form.get("kind", ""))
        option_id = str(form.get("option", ""))
    try:
        wizard.select(kind, option_id)
    except ValueError as e:
        logger.info("Rejected selection: %s", e)
        return render_wizard(wizard, key, status_code=400)
    return with_cookie(to_wizard(), key)


async def set_quantity(request: Request) -> Response:
    key, wizard = current_wizard(request)
    async with request.form() as form:
        raw = str(form.get("quantity", ""))
    try:
        wizard.set_quantity(int(raw))
    except ValueError as e:
        logger.info("Rejected quantity %r: %s", raw, e)
        return render_wizard(wizard, key, status_code=400)
    return with_cookie(to_wizard(), key)


async def next_step(request: Request) -> Response:
    key, wizard = current_wizard(request)
    async with request.form() as form:
        fields = {
            name: str(form[name])
            for name in ("name", "line1", "line2", "city", "postal_code", "country")
            if name in form
        }
    if fields:
        try:
            wizard.update_shipping(**fields)
        except ValueError as e:
            logger.info("Rejected shipping address: %s", e)
            return render_wizard(wizard, key, status_code=400)
    wizard.next()
    return with_cookie(to_wizard(), key)


async def previous_step(request: Request) -> Response:
    key, wizard = current_wizard(request, keep=False)
    wizard.back()
    return with_cookie(to_wizard(), key)


async def cancel(request: Request) -> RedirectResponse:
    key = request.cookies.get(CONFIG.wizard_cookie)
    if key is not None:
        request.app.state.wizards.pop(key)
    response = RedirectResponse("/orders", status_code=303)
    response.delete_cookie(CONFIG.wizard_cookie)
    return response


async def submit(request: Request) -> Response:
    key, wizard = current_wizard(request, keep=False)
    checkout_url = await wizard.submit()
    if checkout_url is None:
        return render_wizard(wizard, key)
    if key is not None:
        request.app.state.wizards.pop(key)
    response = RedirectResponse(checkout_url, status_code=303)
    response.delete_cookie(CONFIG.wizard_cookie)
    return response


@contextlib.asynccontextmanager
async def lifespan(app: Starlette):
    yield
    client: OrdersClient = app.state.orders
    await client.aclose()


@aHTMLResponse
async def orders(request: Request) -> str | tuple[str, int]:
    client: OrdersClient = request.app.state.orders
    try:
        found = await client.list(credential=session_from_request(request))
    except OrderError as e:
        logger.error("Could not list orders: %s", e.message)
        return OrderList([], environment=TEMPLATES, error=e.message).render(), 502
    return OrderList(found, environment=TEMPLATES).render()


app = Starlette(
    debug=True if CONFIG.env == config.Env.local else False,
    routes=[
        Route("/", homepage),
        Route("/order", order),
        Route("/order/select", select_option, methods=["POST"]),
        Route("/order/quantity", set_quantity, methods=["POST"]),
        Route("/order/next", next_step, methods=["POST"]),
        Route("/order/back", previous_step, methods=["POST"]),
        Route("/order/cancel", cancel, methods=["POST"]),
        Route("/order/submit", submit, methods=["POST"]),
        Route("/orders", orders),
        Mount("/assets", StaticFiles(directory=CONFIG.assets_dir)),
    ],
    lifespan=lifespan,
)

app.state.orders = OrdersClient(base_url=CONFIG.api_base, timeout=CONFIG.request_timeout)
app.state.wizards = WizardStore(max_size=CONFIG.max_wizards, ttl=CONFIG.wizard_ttl)
