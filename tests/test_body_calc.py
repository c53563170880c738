"""Tests for BMR/TDEE estimates."""

from __future__ import annotations

import pytest

from healthtrack.errors import InvalidInputError
from healthtrack.profiles.body_calc import (
    ActivityLevel,
    Sex,
    estimate_bmr,
    estimate_tdee,
    parse_sex,
    resolve_activity_multiplier,
)


class TestEstimateBMR:
    """Tests for the Mifflin-St Jeor BMR estimate."""

    def test_male_formula(self) -> None:
        """10*65 + 6.25*170 - 5*25 + 5 = 1592.5."""
        assert estimate_bmr(65, 170, 25, "male") == pytest.approx(1592.5)

    def test_female_formula(self) -> None:
        """10*60 + 6.25*165 - 5*30 - 161 = 1320.25."""
        assert estimate_bmr(60, 165, 30, Sex.FEMALE) == pytest.approx(1320.25)

    def test_male_female_difference_is_166(self) -> None:
        for weight, height, age in [(50, 150, 0), (80, 175, 30), (120.5, 201.3, 77)]:
            male = estimate_bmr(weight, height, age, "male")
            female = estimate_bmr(weight, height, age, "female")
            assert male - female == pytest.approx(166)

    def test_linear_coefficients(self) -> None:
        """Weight +10, height +6.25, age -5 per unit."""
        base = estimate_bmr(70, 170, 40, "male")
        assert estimate_bmr(71, 170, 40, "male") - base == pytest.approx(10)
        assert estimate_bmr(70, 171, 40, "male") - base == pytest.approx(6.25)
        assert estimate_bmr(70, 170, 41, "male") - base == pytest.approx(-5)

    def test_sex_string_case_insensitive(self) -> None:
        assert estimate_bmr(70, 170, 40, " Female ") == estimate_bmr(70, 170, 40, Sex.FEMALE)

    def test_zero_age_allowed(self) -> None:
        assert estimate_bmr(10, 60, 0, "female") == pytest.approx(10 * 10 + 6.25 * 60 - 161)

    @pytest.mark.parametrize(
        "weight,height,age",
        [
            (0, 170, 30),
            (-1, 170, 30),
            (70, 0, 30),
            (70, -5, 30),
            (70, 170, -1),
            (float("nan"), 170, 30),
            (70, float("nan"), 30),
            (70, 170, float("nan")),
            (float("inf"), 170, 30),
        ],
    )
    def test_invalid_metrics_rejected(self, weight, height, age) -> None:
        with pytest.raises(InvalidInputError):
            estimate_bmr(weight, height, age, "male")

    def test_unknown_sex_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            estimate_bmr(70, 170, 30, "other")

    def test_invalid_input_is_value_error(self) -> None:
        """Callers catching ValueError still see input errors."""
        with pytest.raises(ValueError):
            estimate_bmr(-70, 170, 30, "male")


class TestEstimateTDEE:
    """Tests for TDEE scaling."""

    def test_default_multiplier(self) -> None:
        assert estimate_tdee(1592.5) == pytest.approx(2229.5)

    def test_custom_multiplier(self) -> None:
        assert estimate_tdee(1500, 1.55) == pytest.approx(2325)

    @pytest.mark.parametrize("multiplier", [0, -1.2, float("nan"), float("inf")])
    def test_non_positive_or_non_finite_multiplier_rejected(self, multiplier) -> None:
        with pytest.raises(InvalidInputError):
            estimate_tdee(1500, multiplier)


class TestActivityMultiplier:
    """Tests for resolving activity levels."""

    def test_level_names(self) -> None:
        assert resolve_activity_multiplier("sedentary") == 1.2
        assert resolve_activity_multiplier("Moderate") == 1.55
        assert resolve_activity_multiplier(ActivityLevel.VERY_ACTIVE) == 1.9

    def test_numeric_values(self) -> None:
        assert resolve_activity_multiplier(1.4) == 1.4
        assert resolve_activity_multiplier("1.4") == 1.4
        assert resolve_activity_multiplier(2) == 2.0

    @pytest.mark.parametrize(
        "value", ["couch", "0", -1, 0.0, "nan", "inf", float("nan"), float("-inf")]
    )
    def test_invalid_values_rejected(self, value) -> None:
        with pytest.raises(InvalidInputError):
            resolve_activity_multiplier(value)


class TestParseSex:
    def test_passthrough(self) -> None:
        assert parse_sex(Sex.MALE) is Sex.MALE

    def test_string(self) -> None:
        assert parse_sex("FEMALE") is Sex.FEMALE
