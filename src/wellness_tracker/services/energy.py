"""BMR and TDEE calculator."""

from wellness_tracker.domain.energy import BodyProfile, EnergyEstimate, Goal

CM_PER_FOOT = 30.48
CM_PER_INCH = 2.54
KG_PER_POUND = 0.45359237

GOAL_FACTORS: dict[Goal, float] = {
    "maintain": 1.0,
    "cut10": 0.9,
    "cut20": 0.8,
    "gain10": 1.1,
    "gain20": 1.2,
}


def height_cm(profile: BodyProfile) -> float:
    if profile.units == "us":
        return profile.height_ft * CM_PER_FOOT + profile.height_in * CM_PER_INCH
    return profile.height_cm


def weight_kg(profile: BodyProfile) -> float:
    if profile.units == "us":
        return profile.weight_lb * KG_PER_POUND
    return profile.weight_kg


def estimate_energy(profile: BodyProfile) -> EnergyEstimate:
    """Mifflin-St Jeor BMR, scaled by activity and then by the goal."""
    sex_offset = 5 if profile.sex == "male" else -161
    bmr = max(
        10 * weight_kg(profile)
        + 6.25 * height_cm(profile)
        - 5 * profile.age
        + sex_offset,
        0.0,
    )
    tdee = bmr * profile.activity
    return EnergyEstimate(
        bmr=bmr,
        tdee=tdee,
        target=tdee * GOAL_FACTORS.get(profile.goal, 1.0),
    )


def validate_profile(profile: BodyProfile) -> dict[str, str]:
    """Return field errors for the inputs used by the chosen units."""
    errors: dict[str, str] = {}
    if profile.age <= 0:
        errors["age"] = "Age must be greater than 0"
    elif profile.age > 120:
        errors["age"] = "Age must be 120 or less"
    if profile.units == "us":
        if profile.height_ft < 0:
            errors["height_ft"] = "Height cannot be negative"
        elif profile.height_ft > 9:
            errors["height_ft"] = "Height must be 9 feet or less"
        if profile.height_in < 0:
            errors["height_in"] = "Inches cannot be negative"
        elif profile.height_in >= 12:
            errors["height_in"] = "Inches must be less than 12"
        if profile.weight_lb <= 0:
            errors["weight_lb"] = "Weight must be greater than 0"
        elif profile.weight_lb > 1500:
            errors["weight_lb"] = "Weight must be 1500 lb or less"
    else:
        if profile.height_cm <= 0:
            errors["height_cm"] = "Height must be greater than 0"
        elif profile.height_cm > 300:
            errors["height_cm"] = "Height must be 300 cm or less"
        if profile.weight_kg <= 0:
            errors["weight_kg"] = "Weight must be greater than 0"
        elif profile.weight_kg > 680:
            errors["weight_kg"] = "Weight must be 680 kg or less"
    return errors
