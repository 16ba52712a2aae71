from jinja2 import Environment

from domain.catalog import COUNTRIES, COVER_OPTIONS, FINISH_OPTIONS, PAPER_OPTIONS, Option
from domain.wizard import STEP_LABELS, TOTAL_STEPS, OrderWizard


STEP_TITLES = {
    1: "Quel type de couverture ?",
    2: "Choix du papier",
    3: "Finition de couverture",
    4: "Adresse de livraison",
    5: "Récapitulatif",
}


class OptionCard:
    def __init__(self, option: Option, *, selected: bool) -> None:
        self.id = option.id
        self.name = option.name
        self.description = option.description
        self.badge = None if option.price is None else f"+{option.price}€"
        self.selected = selected


class OrderWizardView:
    def __init__(
        self,
        wizard: OrderWizard,
        *,
        environment: Environment,
        template_name: str = "order-wizard.html",
    ) -> None:
        self.wizard = wizard
        self.env = environment
        self.name = template_name

    @property
    def step(self) -> int:
        return self.wizard.step

    @property
    def title(self) -> str:
        return STEP_TITLES[self.wizard.step]

    @property
    def progress(self) -> list[tuple[str, bool]]:
        return [(label, i + 1 <= self.wizard.step) for i, label in enumerate(STEP_LABELS)]

    @property
    def kind(self) -> str | None:
        return {1: "cover", 2: "paper", 3: "finish"}.get(self.wizard.step)

    @property
    def options(self) -> list[OptionCard]:
        config = self.wizard.config
        match self.wizard.step:
            case 1:
                options, selected = COVER_OPTIONS, config.cover_type
            case 2:
                options, selected = PAPER_OPTIONS, config.paper_type
            case 3:
                options, selected = FINISH_OPTIONS, config.finish_type
            case _:
                return []
        return [OptionCard(o, selected=o.id == selected) for o in options]

    @property
    def countries(self) -> dict[str, str]:
        return COUNTRIES

    @property
    def is_last_step(self) -> bool:
        return self.wizard.step == TOTAL_STEPS

    def render(self) -> str:
        return self.env.get_template(self.name).render(view=self, wizard=self.wizard)
