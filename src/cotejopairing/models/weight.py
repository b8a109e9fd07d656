"""Weight units and conversions."""

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

from enum import Enum

from cotejopairing.constants import GRAMS_PER_OUNCE, GRAMS_PER_POUND


class WeightUnit(Enum):
    """Unit a weight was recorded in."""

    GRAMS = "g"
    OUNCES = "oz"
    POUNDS = "lb"

    @property
    def grams_per_unit(self) -> float:
        if self is WeightUnit.POUNDS:
            return GRAMS_PER_POUND
        if self is WeightUnit.OUNCES:
            return GRAMS_PER_OUNCE
        return 1.0

    @property
    def abbreviation(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: "str | WeightUnit") -> "WeightUnit":
        """Accept an enum member, its value ("lb") or its name ("POUNDS")."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for unit in cls:
            if text.lower() in (unit.value, unit.name.lower()):
                return unit
        raise ValueError(f"Unknown weight unit: {value!r}")


def to_grams(weight: float, unit: WeightUnit) -> float:
    """Convert a weight in ``unit`` to grams."""
    return weight * unit.grams_per_unit


def from_grams(grams: float, unit: WeightUnit) -> float:
    """Convert grams to ``unit``."""
    return grams / unit.grams_per_unit


def format_weight(grams: float, unit: WeightUnit = WeightUnit.GRAMS) -> str:
    """Format a weight for display in ``unit``.

    Pounds show three decimals, ounces two and grams none.

    Example
    -------
        >>> format_weight(2750, WeightUnit.GRAMS)
        '2750 g'
    """
    value = from_grams(grams, unit)
    if unit is WeightUnit.POUNDS:
        display = f"{value:.3f}"
    elif unit is WeightUnit.OUNCES:
        display = f"{value:.2f}"
    else:
        display = f"{value:.0f}"
    return f"{display} {unit.abbreviation}"
