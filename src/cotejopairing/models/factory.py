"""Factory for creating Competitor objects with validation.

This module implements the Factory pattern for Competitor creation,
providing a single point of entry for creating competitors with
proper validation, unit parsing and age derivation from hatch dates.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta

from cotejopairing.exceptions import InvalidCompetitorDataException
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.weight import WeightUnit
from cotejopairing.utils import generate_id, setup_logger
from cotejopairing.utils.validation import (
    validate_age_months,
    validate_name,
    validate_weight,
)

logger = setup_logger(__name__)


def age_in_months(hatch_date: Union[date, str], on: Optional[date] = None) -> int:
    """Whole months elapsed between ``hatch_date`` and ``on`` (default today).

    Example:
        >>> age_in_months(date(2024, 1, 15), on=date(2025, 4, 14))
        14
    """
    if isinstance(hatch_date, str):
        hatch_date = date.fromisoformat(hatch_date)
    on = on or date.today()
    if hatch_date > on:
        raise InvalidCompetitorDataException(
            f"Hatch date {hatch_date.isoformat()} is after {on.isoformat()}"
        )
    delta = relativedelta(on, hatch_date)
    return delta.years * 12 + delta.months


class CompetitorFactory:
    """Factory for creating Competitor instances.

    Example:
        >>> factory = CompetitorFactory()
        >>> rooster = factory.create_competitor(
        ...     team_id="t1", name="Tornado", weight=2800, age_months=17
        ... )
    """

    def __init__(self, validate: bool = True, strict: bool = True):
        """Initialize the CompetitorFactory.

        Args:
            validate: Whether to validate input data
            strict: Whether to raise exceptions on validation errors
        """
        self.validate = validate
        self.strict = strict

    def create_competitor(
        self,
        team_id: str,
        weight: float,
        weight_unit: Union[WeightUnit, str] = WeightUnit.GRAMS,
        age_months: Optional[int] = None,
        hatch_date: Optional[Union[date, str]] = None,
        on: Optional[date] = None,
        name: str = "",
        notes: str = "",
        ring_id: str = "",
        id: Optional[str] = None,
    ) -> Competitor:
        """Create a competitor.

        Args:
            team_id: Owning team id
            weight: Weight in ``weight_unit``
            weight_unit: Unit of ``weight`` (enum member or "g"/"oz"/"lb")
            age_months: Age in months, if known
            hatch_date: Used to derive ``age_months`` when it is not given
            on: Reference date for ``hatch_date`` (default today)
            name: Display name
            notes: Free-text characteristics
            ring_id: Leg-band identifier
            id: Explicit identifier, generated when omitted

        Returns:
            Competitor instance

        Raises:
            InvalidCompetitorDataException: If validation fails and strict=True
        """
        if not team_id:
            raise InvalidCompetitorDataException("Competitor must belong to a team")

        try:
            unit = WeightUnit.parse(weight_unit)
        except ValueError as exc:
            raise InvalidCompetitorDataException(str(exc)) from exc

        if age_months is None and hatch_date is not None:
            age_months = age_in_months(hatch_date, on)

        if self.validate:
            errors = self._validate_data(name=name, weight=weight, age_months=age_months)
            if errors:
                message = f"Invalid competitor data: {'; '.join(errors)}"
                if self.strict:
                    raise InvalidCompetitorDataException(message)
                logger.warning(message)

        try:
            weight = float(weight)
        except (TypeError, ValueError) as exc:
            raise InvalidCompetitorDataException(
                f"Weight must be a number: {weight!r}"
            ) from exc

        return Competitor(
            id=id or generate_id("Competitor"),
            team_id=str(team_id),
            weight=weight,
            weight_unit=unit,
            age_months=int(age_months) if age_months is not None else None,
            notes=notes or "",
            name=validate_name(name, required=False).sanitized_value or "",
            ring_id=ring_id or "",
        )

    def create_from_dict(self, data: Dict[str, Any]) -> Competitor:
        """Create a competitor from dictionary data.

        Raises:
            InvalidCompetitorDataException: If required fields are missing
        """
        for required in ("team_id", "weight"):
            if required not in data:
                raise InvalidCompetitorDataException(
                    f"Competitor field '{required}' is required"
                )
        return self.create_competitor(
            team_id=data["team_id"],
            weight=data["weight"],
            weight_unit=data.get("weight_unit", WeightUnit.GRAMS),
            age_months=data.get("age_months"),
            hatch_date=data.get("hatch_date"),
            name=data.get("name", ""),
            notes=data.get("notes", ""),
            ring_id=data.get("ring_id", ""),
            id=str(data["id"]) if data.get("id") is not None else None,
        )

    def create_batch(self, competitor_data_list: List[Dict[str, Any]]) -> List[Competitor]:
        """Create multiple competitors, skipping invalid rows in non-strict mode."""
        competitors: List[Competitor] = []
        for data in competitor_data_list:
            try:
                competitors.append(self.create_from_dict(data))
            except InvalidCompetitorDataException as e:
                if self.strict:
                    raise
                logger.warning("Skipping invalid competitor data: %s", e)
        return competitors

    def _validate_data(
        self, name: str, weight: float, age_months: Optional[int]
    ) -> List[str]:
        errors = []

        name_result = validate_name(name, required=False)
        if not name_result:
            errors.append(name_result.error_message or "Invalid name")

        weight_result = validate_weight(weight)
        if not weight_result:
            errors.append(weight_result.error_message or "Invalid weight")

        age_result = validate_age_months(age_months)
        if not age_result:
            errors.append(age_result.error_message or "Invalid age")

        return errors


# Global factory instance for convenience
default_factory = CompetitorFactory(validate=True, strict=True)


def create_competitor(**kwargs) -> Competitor:
    """Convenience function to create a competitor using the default factory."""
    return default_factory.create_competitor(**kwargs)


def create_competitor_from_dict(data: Dict[str, Any]) -> Competitor:
    """Convenience function to create a competitor from dict using default factory."""
    return default_factory.create_from_dict(data)
