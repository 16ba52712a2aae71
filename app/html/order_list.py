from jinja2 import Environment

from domain.models import Order
from domain.pricing import cover_label, format_date, format_minor_units


class OrderRow:
    def __init__(self, order: Order) -> None:
        self.order = order

    @property
    def status(self) -> str:
        return self.order.status_label

    @property
    def status_class(self) -> str:
        return f"status-{self.order.status.lower()}"

    @property
    def date(self) -> str:
        return format_date(self.order.created_at)

    @property
    def total(self) -> str:
        return format_minor_units(self.order.amount_total, self.order.currency)

    @property
    def cover(self) -> str:
        return cover_label(self.order.print_options.get("coverType"))

    @property
    def shipping(self) -> str | None:
        address = self.order.shipping_address
        if address is None:
            return None
        return f"{address.name}, {address.city}, {address.country}"


class OrderList:
    def __init__(
        self,
        orders: list[Order],
        *,
        environment: Environment,
        error: str | None = None,
        template_name: str = "order-list.html",
    ) -> None:
        self.rows = [OrderRow(o) for o in orders]
        self.error = error
        self.env = environment
        self.name = template_name

    def render(self) -> str:
        return self.env.get_template(self.name).render(orders=self)
