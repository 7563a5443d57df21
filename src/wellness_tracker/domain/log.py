"""Domain models for the food log."""

from dataclasses import dataclass
from uuid import UUID

from wellness_tracker.domain.nutrition import NutrientBasisPerGram, NutrientSnapshot


@dataclass(frozen=True)
class LogItem:
    """One logged food at its current serving.

    ``nutrients`` always equals ``basis.scaled(serving_g)``; items are only
    replaced through the amount-change operation. A logged food comes from
    the lookup service (``fdc_id``), from a custom food (``custom_food_id``),
    or from neither for legacy manual entries.
    """

    id: str
    name: str
    brand: str | None
    serving_g: float
    nutrients: NutrientSnapshot
    basis: NutrientBasisPerGram
    fdc_id: int | None = None
    custom_food_id: UUID | None = None

    def __post_init__(self) -> None:
        if self.fdc_id is not None and self.custom_food_id is not None:
            raise ValueError(
                "A log item references either an FDC food or a custom food"
            )

    @property
    def fiber_g(self) -> float:
        return self.nutrients.micro("fiber")


@dataclass(frozen=True)
class AmountUpdate:
    """Result of an amount edit: the item in effect and any field error."""

    item: LogItem
    error: str = ""
