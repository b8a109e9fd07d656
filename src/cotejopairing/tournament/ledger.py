"""Fight numbering and outcome recording.

This module keeps the authoritative list of fights of an event. Fights are
numbered contiguously across phases as they are added and their outcome can
be written exactly once.
"""

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

import math
import threading
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from cotejopairing.exceptions import (
    AlreadyDecidedException,
    DuplicateFightException,
    FightNumberingException,
    InvalidOutcomeException,
    UnknownFightException,
)
from cotejopairing.models.competitor import Competitor
from cotejopairing.models.fight import Fight, Outcome, Phase
from cotejopairing.utils import setup_logger

logger = setup_logger(__name__)


def number_fights(existing_max_seq: int, new_fights: Sequence[Fight]) -> List[Fight]:
    """Number fights after ``existing_max_seq``, keeping their order.

    Args:
        existing_max_seq: Highest fight number already assigned (0 if none)
        new_fights: Fights to number

    Returns:
        New Fight objects numbered ``existing_max_seq + 1`` onwards
    """
    if existing_max_seq < 0:
        raise ValueError(f"Sequence numbers start at 0, got {existing_max_seq}")
    return [
        fight.with_sequence(existing_max_seq + offset)
        for offset, fight in enumerate(new_fights, start=1)
    ]


def _parse_outcome(outcome: Union[Outcome, str]) -> Outcome:
    if isinstance(outcome, Outcome):
        return outcome
    try:
        return Outcome(outcome)
    except ValueError as exc:
        raise InvalidOutcomeException(f"Unknown outcome: {outcome!r}") from exc


def _parse_duration(duration: Any) -> float:
    try:
        value = float(duration)
    except (TypeError, ValueError) as exc:
        raise InvalidOutcomeException(
            f"Duration must be a non-negative number of seconds: {duration!r}"
        ) from exc
    if not math.isfinite(value) or value < 0:
        raise InvalidOutcomeException(
            f"Duration must be a non-negative number of seconds: {duration!r}"
        )
    return value


class FightLedger:
    """Numbered fights of an event and their outcomes.

    All mutations go through an internal lock, so a ledger may be shared by
    several threads. The outcome of a fight is write-once.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        # insertion order is sequence order
        self._fights: Dict[str, Fight] = {}

    def __len__(self) -> int:
        return len(self._fights)

    def __iter__(self) -> Iterator[Fight]:
        return iter(self.fights)

    def __contains__(self, fight_id: object) -> bool:
        return fight_id in self._fights

    @property
    def max_sequence(self) -> int:
        """Highest fight number in the ledger, 0 when empty."""
        with self._lock:
            if not self._fights:
                return 0
            return max(fight.sequence for fight in self._fights.values())

    @property
    def fights(self) -> List[Fight]:
        """All fights ordered by fight number."""
        with self._lock:
            return sorted(self._fights.values(), key=lambda f: f.sequence)

    @property
    def pending_fights(self) -> List[Fight]:
        return [fight for fight in self.fights if fight.is_pending]

    @property
    def decided_fights(self) -> List[Fight]:
        return [fight for fight in self.fights if not fight.is_pending]

    def next_pending_fight(self) -> Optional[Fight]:
        """Lowest-numbered fight still waiting for a result."""
        pending = self.pending_fights
        return pending[0] if pending else None

    def fights_for_phase(self, phase: Phase) -> List[Fight]:
        return [fight for fight in self.fights if fight.phase is phase]

    def get_fight(self, fight_id: str) -> Fight:
        """Return a fight by id.

        Raises:
            UnknownFightException: If the id is not in the ledger
        """
        with self._lock:
            try:
                return self._fights[fight_id]
            except KeyError as exc:
                raise UnknownFightException(f"Unknown fight: {fight_id}") from exc

    def get_by_sequence(self, sequence: int) -> Fight:
        """Return a fight by its number.

        Raises:
            UnknownFightException: If no fight has that number
        """
        with self._lock:
            for fight in self._fights.values():
                if fight.sequence == sequence:
                    return fight
        raise UnknownFightException(f"No fight numbered {sequence}")

    def add_fights(self, fights: Sequence[Fight]) -> List[Fight]:
        """Number new fights after the current maximum and store them.

        Raises:
            DuplicateFightException: If a fight id is already recorded, or a
                competitor would fight twice in the same phase

        Returns:
            The numbered fights, in the given order
        """
        with self._lock:
            self._check_new_fights(fights)
            numbered = number_fights(self.max_sequence, fights)
            for fight in numbered:
                self._fights[fight.id] = fight

        if numbered:
            logger.info(
                "Numbered %s %s fight(s): #%s to #%s",
                len(numbered),
                numbered[0].phase.value,
                numbered[0].sequence,
                numbered[-1].sequence,
            )
        return numbered

    def _check_new_fights(self, fights: Sequence[Fight]) -> None:
        busy = {
            (competitor_id, fight.phase)
            for fight in self._fights.values()
            for competitor_id in (fight.first.id, fight.second.id)
        }
        new_ids = set()
        for fight in fights:
            if fight.id in self._fights or fight.id in new_ids:
                raise DuplicateFightException(f"Fight {fight.id} is already recorded")
            new_ids.add(fight.id)
            for competitor in fight.competitors:
                key = (competitor.id, fight.phase)
                if key in busy:
                    raise DuplicateFightException(
                        f"{competitor} already fights in the {fight.phase.value} phase"
                    )
                busy.add(key)

    def record_outcome(
        self,
        fight_id: str,
        outcome: Union[Outcome, str],
        duration: float,
    ) -> Fight:
        """Record the outcome of a pending fight.

        Args:
            fight_id: Id of the fight
            outcome: WIN_FIRST, WIN_SECOND or DRAW (enum or its value)
            duration: Elapsed fight time in seconds

        Returns:
            The decided fight

        Raises:
            InvalidOutcomeException: If outcome is PENDING or duration is invalid
            UnknownFightException: If the fight is not in the ledger
            AlreadyDecidedException: If the fight already has an outcome
        """
        outcome = _parse_outcome(outcome)
        if not outcome.is_decided:
            raise InvalidOutcomeException("Cannot record a pending outcome")
        duration = _parse_duration(duration)

        with self._lock:
            fight = self._fights.get(fight_id)
            if fight is None:
                logger.warning("Outcome for unknown fight %s rejected", fight_id)
                raise UnknownFightException(f"Unknown fight: {fight_id}")
            if not fight.is_pending:
                logger.warning(
                    "Fight #%s already decided (%s), outcome %s rejected",
                    fight.sequence,
                    fight.outcome.value,
                    outcome.value,
                )
                raise AlreadyDecidedException(
                    f"Fight #{fight.sequence} already decided: {fight.outcome.value}"
                )
            decided = fight.decided(outcome, duration)
            self._fights[fight_id] = decided

        logger.info(
            "Fight #%s decided: %s after %ss", decided.sequence, outcome.value, duration
        )
        return decided

    def to_dict(self) -> Dict[str, Any]:
        """Serialize ledger to dictionary."""
        return {"fights": [fight.to_dict() for fight in self.fights]}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], competitors: Mapping[str, Competitor]
    ) -> "FightLedger":
        """Rebuild a ledger from stored fights.

        Raises:
            FightNumberingException: If fight numbers do not run 1..n without gaps
            DuplicateFightException: If a fight id is stored twice
            InvalidOutcomeException: If a decided fight has no valid duration
        """
        ledger = cls()
        fights = []
        for item in data.get("fights", []):
            fight = Fight.from_dict(item, competitors)
            if not fight.is_pending:
                fight = fight.decided(fight.outcome, _parse_duration(fight.duration))
            fights.append(fight)
        fights.sort(key=lambda f: f.sequence or 0)
        expected = list(range(1, len(fights) + 1))
        if [fight.sequence for fight in fights] != expected:
            raise FightNumberingException(
                "Stored fight numbers must be contiguous from 1"
            )
        for fight in fights:
            if fight.id in ledger._fights:
                raise DuplicateFightException(f"Fight {fight.id} stored twice")
            ledger._fights[fight.id] = fight
        return ledger

    @classmethod
    def from_fights(cls, fights: Iterable[Fight]) -> "FightLedger":
        """New ledger numbering ``fights`` from 1."""
        ledger = cls()
        ledger.add_fights(list(fights))
        return ledger
