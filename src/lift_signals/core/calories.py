"""
Calorie estimation with the MET formula.

    kcal = MET × 3.5 × body weight (kg) × duration (min) / 200

Strength training sits between MET 3 and 8; inputs outside that range (or
an implausible body weight / duration) are caller errors and raise.
"""

from .config import DEFAULT_MET, MET_MAX, MET_MIN, MIN_BODYWEIGHT_KG
from .models import CalorieResult

DISCLAIMER = (
    "This is an estimate based on the MET formula and average values. Actual "
    "expenditure varies with age, sex, body composition, intensity, rest times "
    "and individual metabolism. Use a heart-rate monitor or wearable for "
    "accurate measurements."
)


def calculate_burned_calories(
    weight_kg: float,
    duration_minutes: float,
    met: float = DEFAULT_MET,
) -> CalorieResult:
    """
    Estimate calories burned in one session.

    Args:
        weight_kg: Body weight, at least 30 kg
        duration_minutes: Session length including rest, > 0
        met: MET value between 3 and 8

    Returns:
        CalorieResult with the rounded kcal and the worked calculation

    Raises:
        ValueError: If any input is out of range
    """
    if weight_kg < MIN_BODYWEIGHT_KG:
        raise ValueError(f"Body weight must be at least {MIN_BODYWEIGHT_KG:g} kg")
    if duration_minutes <= 0:
        raise ValueError("Duration must be greater than 0 minutes")
    if not MET_MIN <= met <= MET_MAX:
        raise ValueError(
            f"MET value for strength training must be between {MET_MIN:g} and {MET_MAX:g}"
        )

    kcal = round(met * 3.5 * weight_kg * duration_minutes / 200)
    return CalorieResult(
        kcal=kcal,
        explanation=(
            f"Calculation: ({met:g} × 3.5 × {weight_kg:g} kg × {duration_minutes:g} min)"
            f" / 200 = {kcal} kcal"
        ),
        disclaimer=DISCLAIMER,
    )


def calculate_total_workout_calories(
    exercises: list[dict],
    weight_kg: float,
    met: float = DEFAULT_MET,
) -> int:
    """
    Sum calories over exercise blocks.

    Each block is a dict with an optional ``estimated_calories`` (used as-is
    when truthy) and an optional ``duration_minutes``.  Blocks with neither
    contribute nothing.

    Raises:
        ValueError: If a duration-based block has out-of-range inputs
    """
    total = 0
    for block in exercises:
        estimated = block.get("estimated_calories")
        if estimated:
            total += round(estimated)
            continue
        duration = block.get("duration_minutes")
        if duration:
            total += calculate_burned_calories(weight_kg, duration, met).kcal
    return total


def format_calorie_range(base_calories: float, variance: float = 0.15) -> str:
    """Show an estimate with its uncertainty, e.g. "340-460 kcal" for 400."""
    lower = round(base_calories * (1 - variance))
    upper = round(base_calories * (1 + variance))
    return f"{lower}-{upper} kcal"
