"""Competitor data class."""

# Cotejo Pairing
# Copyright (C) 2025  Cotejo Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass
from typing import Any, Dict, Optional

from cotejopairing.models.weight import WeightUnit, format_weight, to_grams


@dataclass(frozen=True, slots=True)
class Competitor:
    """
    An individual entrant (a rooster) owned by a team.

    Competitors are immutable once matching begins. Fights reference them,
    they are never copied into a fight.

    Parameters
    ----------
    id : str
        Unique competitor identifier.
    team_id : str
        Identifier of the owning team.
    weight : float
        Weight expressed in ``weight_unit``.
    weight_unit : WeightUnit
        Unit the weight was recorded in.
    age_months : int or None
        Age in months, ``None`` when unknown.
    notes : str
        Free-text characteristics.
    name : str
        Display name.
    ring_id : str
        Leg-band identifier.

    Examples
    --------
    >>> c = Competitor(id="c1", team_id="t1", weight=6.0, weight_unit=WeightUnit.POUNDS)
    >>> round(c.weight_grams, 3)
    2721.552
    """

    id: str
    team_id: str
    weight: float
    weight_unit: WeightUnit = WeightUnit.GRAMS
    age_months: Optional[int] = None
    notes: str = ""
    name: str = ""
    ring_id: str = ""

    @property
    def weight_grams(self) -> float:
        """Weight normalized to grams."""
        return to_grams(self.weight, self.weight_unit)

    @property
    def display_name(self) -> str:
        return self.name or self.id

    def describe(self, unit: WeightUnit = WeightUnit.GRAMS) -> str:
        """Short label such as ``Tornado (2800 g / 17m)``."""
        age = f"{self.age_months}m" if self.age_months is not None else "N/A"
        return f"{self.display_name} ({format_weight(self.weight_grams, unit)} / {age})"

    def __str__(self) -> str:
        return self.display_name

    def to_dict(self) -> Dict[str, Any]:
        """Serialize competitor to dictionary."""
        return {
            "id": self.id,
            "team_id": self.team_id,
            "weight": self.weight,
            "weight_unit": self.weight_unit.value,
            "age_months": self.age_months,
            "notes": self.notes,
            "name": self.name,
            "ring_id": self.ring_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Competitor":
        """Deserialize competitor from dictionary."""
        age = data.get("age_months")
        return cls(
            id=str(data["id"]),
            team_id=str(data["team_id"]),
            weight=float(data["weight"]),
            weight_unit=WeightUnit.parse(data.get("weight_unit", WeightUnit.GRAMS)),
            age_months=int(age) if age is not None else None,
            notes=data.get("notes", ""),
            name=data.get("name", ""),
            ring_id=data.get("ring_id", ""),
        )
