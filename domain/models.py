from datetime import datetime
from enum import Enum
from typing import Any

from domain.catalog import DEFAULT_COUNTRY, DEFAULT_FORMAT


class OrderConfiguration:
    """What the user picked for the physical book."""

    def __init__(
        self,
        *,
        cover_type: str | None = None,
        paper_type: str | None = None,
        finish_type: str | None = None,
        quantity: int = 1,
        format: str = DEFAULT_FORMAT,
    ) -> None:
        self.cover_type = cover_type
        self.paper_type = paper_type
        self.finish_type = finish_type
        self.quantity = quantity
        self.format = format

    @property
    def quantity(self) -> int:
        return self._quantity

    @quantity.setter
    def quantity(self, value: int) -> None:
        if value < 1:
            raise ValueError(f"Quantity must be at least 1, got {value}.")
        self._quantity = value

    def __repr__(self) -> str:
        return (
            f"<OrderConfiguration(cover={self.cover_type}, paper={self.paper_type}, "
            f"finish={self.finish_type}, quantity={self.quantity})>"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderConfiguration):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict[str, Any]:
        return {
            "coverType": self.cover_type,
            "paperType": self.paper_type,
            "finishType": self.finish_type,
            "quantity": self.quantity,
            "format": self.format,
        }


class ShippingAddress:
    def __init__(
        self,
        *,
        name: str = "",
        line1: str = "",
        line2: str = "",
        city: str = "",
        postal_code: str = "",
        country: str = DEFAULT_COUNTRY,
    ) -> None:
        self.name = name
        self.line1 = line1
        self.line2 = line2
        self.city = city
        self.postal_code = postal_code
        self.country = country

    @property
    def is_valid(self) -> bool:
        return (
            len(self.name) > 2
            and len(self.line1) > 5
            and len(self.city) > 2
            and len(self.postal_code) > 4
        )

    def __repr__(self) -> str:
        return f"<ShippingAddress(name={self.name}, city={self.city})>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShippingAddress):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShippingAddress":
        return cls(
            name=data.get("name") or "",
            line1=data.get("line1") or "",
            line2=data.get("line2") or "",
            city=data.get("city") or "",
            postal_code=data.get("postalCode") or "",
            country=data.get("country") or DEFAULT_COUNTRY,
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "line1": self.line1,
            "line2": self.line2,
            "city": self.city,
            "postalCode": self.postal_code,
            "country": self.country,
        }


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    IN_PRODUCTION = "IN_PRODUCTION"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


STATUS_LABELS = {
    OrderStatus.PENDING: "En attente de paiement",
    OrderStatus.PAID: "Payée",
    OrderStatus.IN_PRODUCTION: "En production",
    OrderStatus.SHIPPED: "Expédiée",
    OrderStatus.DELIVERED: "Livrée",
    OrderStatus.CANCELLED: "Annulée",
    OrderStatus.REFUNDED: "Remboursée",
}


class Order:
    """An order as the backend reports it. Read only on our side."""

    def __init__(
        self,
        *,
        id: str,
        amount_total: int,
        currency: str,
        status: str,
        quantity: int,
        print_options: dict[str, Any],
        created_at: datetime,
        shipping_address: ShippingAddress | None = None,
        tracking_number: str | None = None,
        tracking_url: str | None = None,
    ) -> None:
        self.id = id
        self.amount_total = amount_total
        self.currency = currency
        self.status = status
        self.quantity = quantity
        self.print_options = print_options
        self.created_at = created_at
        self.shipping_address = shipping_address
        self.tracking_number = tracking_number
        self.tracking_url = tracking_url

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, status={self.status})>"

    @property
    def known_status(self) -> OrderStatus | None:
        try:
            return OrderStatus(self.status.upper())
        except ValueError:
            return None

    @property
    def status_label(self) -> str:
        status = self.known_status
        return self.status if status is None else STATUS_LABELS[status]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        shipping = data.get("shippingAddress")
        return cls(
            id=str(data["id"]),
            amount_total=int(data["amountTotal"]),
            currency=data.get("currency") or "eur",
            status=data.get("status") or OrderStatus.PENDING.value,
            quantity=int(data.get("quantity") or 1),
            print_options=data.get("printOptions") or {},
            created_at=parse_datetime(data["createdAt"]),
            shipping_address=ShippingAddress.from_dict(shipping) if shipping else None,
            tracking_number=data.get("trackingNumber"),
            tracking_url=data.get("trackingUrl"),
        )


def parse_datetime(value: str) -> datetime:
    # Older Pythons do not accept the trailing Z.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
