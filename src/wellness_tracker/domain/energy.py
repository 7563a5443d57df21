"""Domain models for the energy calculator."""

from dataclasses import dataclass
from typing import Literal

Sex = Literal["male", "female"]
Units = Literal["us", "metric"]
Goal = Literal["maintain", "cut10", "cut20", "gain10", "gain20"]


@dataclass(frozen=True)
class BodyProfile:
    """Calculator inputs; only the fields for the chosen units are read."""

    units: Units = "us"
    sex: Sex = "male"
    age: float = 0.0
    height_ft: float = 0.0
    height_in: float = 0.0
    height_cm: float = 0.0
    weight_lb: float = 0.0
    weight_kg: float = 0.0
    activity: float = 1.55
    goal: Goal = "maintain"


@dataclass(frozen=True)
class EnergyEstimate:
    """Daily energy figures in kcal."""

    bmr: float
    tdee: float
    target: float
