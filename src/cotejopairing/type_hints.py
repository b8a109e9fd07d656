"""Type hints used in Cotejo Pairing."""

from typing import List, Literal, Optional, Tuple

# Outcome literals (serialized form of Outcome)
OutcomeValue = Literal["pending", "win_first", "win_second", "draw"]

# Phase literals (serialized form of Phase)
PhaseValue = Literal["main", "individual"]

# Strategy names accepted by get_matcher
StrategyName = Literal["exact", "greedy"]

# Two team ids that must never meet
TeamPair = Tuple[str, str]
# Tuple of competitor indices in a matching arena
IndexPair = Tuple[int, int]
# All pairs produced by a search, or None when infeasible
IndexPairing = Optional[List[IndexPair]]

Competitors = List["Competitor"]
MaybeCompetitor = Optional["Competitor"]

#  LocalWords:  IndexPairing
