from decimal import Decimal


class Option:
    def __init__(
        self,
        *,
        id: str,
        name: str,
        description: str,
        price: Decimal | None = None,
    ) -> None:
        self.id = id
        self.name = name
        self.description = description
        self.price = price

    def __repr__(self) -> str:
        return f"<Option(id={self.id}, price={self.price})>"


COVER_OPTIONS = (
    Option(
        id="hardcover",
        name="Couverture Rigide",
        description="Robuste et élégant.",
        price=Decimal(25),
    ),
    Option(
        id="softcover",
        name="Couverture Souple",
        description="Léger et flexible.",
        price=Decimal(15),
    ),
)


PAPER_OPTIONS = (
    Option(
        id="standard_matte",
        name="Standard Mat",
        description="Rendu naturel.",
        price=Decimal(0),
    ),
    Option(
        id="premium_silk",
        name="Premium Silk",
        description="Toucher soyeux.",
        price=Decimal(5),
    ),
)


# Finishes carry no price.
FINISH_OPTIONS = (
    Option(id="matte", name="Lamination Mate", description="Moderne."),
    Option(id="glossy", name="Lamination Brillante", description="Éclatant."),
)


OPTIONS_BY_KIND = {
    "cover": COVER_OPTIONS,
    "paper": PAPER_OPTIONS,
    "finish": FINISH_OPTIONS,
}


COUNTRIES = {
    "FR": "France",
    "BE": "Belgique",
    "CH": "Suisse",
    "CA": "Canada",
}
DEFAULT_COUNTRY = "FR"
DEFAULT_FORMAT = "A5"
UNDEFINED = "Non défini"


def find_option(options: tuple[Option, ...], id: str | None) -> Option | None:
    if id is None:
        return None
    for option in options:
        if option.id == id:
            return option
    return None


def price_of(options: tuple[Option, ...], id: str | None) -> Decimal:
    option = find_option(options, id)
    if option is None or option.price is None:
        return Decimal(0)
    return option.price


def option_name(options: tuple[Option, ...], id: str | None) -> str:
    option = find_option(options, id)
    return UNDEFINED if option is None else option.name
