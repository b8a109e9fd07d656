"""Fight data class and its outcome/phase enums."""

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

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from cotejopairing.constants import (
    OUTCOME_DRAW,
    OUTCOME_PENDING,
    OUTCOME_WIN_FIRST,
    OUTCOME_WIN_SECOND,
    PHASE_INDIVIDUAL,
    PHASE_MAIN,
)
from cotejopairing.models.competitor import Competitor
from cotejopairing.utils import generate_id


class Outcome(Enum):
    """Result of a fight. Only ``PENDING`` may ever change."""

    PENDING = OUTCOME_PENDING
    WIN_FIRST = OUTCOME_WIN_FIRST
    WIN_SECOND = OUTCOME_WIN_SECOND
    DRAW = OUTCOME_DRAW

    @property
    def is_decided(self) -> bool:
        return self is not Outcome.PENDING


class Phase(Enum):
    """Matching pass that produced a fight."""

    MAIN = PHASE_MAIN
    INDIVIDUAL = PHASE_INDIVIDUAL


@dataclass(frozen=True, slots=True)
class Fight:
    """A head-to-head match between two competitors.

    The order of ``first`` and ``second`` carries no meaning. A fight is
    numbered once by the ledger and decided once; nothing else changes.

    Attributes
    ----------
    first : Competitor
        One side of the fight.
    second : Competitor
        The other side.
    phase : Phase
        Main bracket or individual (leftover) round.
    sequence : int or None
        1-based fight number, ``None`` until the ledger numbers it.
    outcome : Outcome
        ``PENDING`` until decided.
    duration : float or None
        Elapsed seconds, set together with a decided outcome.
    id : str
        Unique fight identifier.
    """

    first: Competitor
    second: Competitor
    phase: Phase = Phase.MAIN
    sequence: Optional[int] = None
    outcome: Outcome = Outcome.PENDING
    duration: Optional[float] = None
    id: str = field(default_factory=lambda: generate_id("Fight"))

    @property
    def is_pending(self) -> bool:
        return self.outcome is Outcome.PENDING

    @property
    def competitors(self) -> Tuple[Competitor, Competitor]:
        return (self.first, self.second)

    @property
    def team_ids(self) -> Tuple[str, str]:
        return (self.first.team_id, self.second.team_id)

    @property
    def weight_difference(self) -> float:
        """Absolute weight difference in grams."""
        return abs(self.first.weight_grams - self.second.weight_grams)

    @property
    def winner(self) -> Optional[Competitor]:
        if self.outcome is Outcome.WIN_FIRST:
            return self.first
        if self.outcome is Outcome.WIN_SECOND:
            return self.second
        return None

    @property
    def loser(self) -> Optional[Competitor]:
        if self.outcome is Outcome.WIN_FIRST:
            return self.second
        if self.outcome is Outcome.WIN_SECOND:
            return self.first
        return None

    def involves(self, competitor_id: str) -> bool:
        return competitor_id in (self.first.id, self.second.id)

    def with_sequence(self, sequence: int) -> "Fight":
        """Return a copy carrying its fight number."""
        return replace(self, sequence=sequence)

    def decided(self, outcome: Outcome, duration: float) -> "Fight":
        """Return a copy with its outcome and duration set."""
        return replace(self, outcome=outcome, duration=duration)

    def __str__(self) -> str:
        number = f"#{self.sequence}" if self.sequence is not None else "#?"
        return f"Fight {number}: {self.first} vs {self.second}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize fight to dictionary. Competitors are stored by id."""
        return {
            "id": self.id,
            "first_id": self.first.id,
            "second_id": self.second.id,
            "phase": self.phase.value,
            "sequence": self.sequence,
            "outcome": self.outcome.value,
            "duration": self.duration,
        }

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], competitors: Mapping[str, Competitor]
    ) -> "Fight":
        """Deserialize fight from dictionary, resolving competitors by id."""
        return cls(
            id=data["id"],
            first=competitors[data["first_id"]],
            second=competitors[data["second_id"]],
            phase=Phase(data.get("phase", PHASE_MAIN)),
            sequence=data.get("sequence"),
            outcome=Outcome(data.get("outcome", OUTCOME_PENDING)),
            duration=data.get("duration"),
        )
