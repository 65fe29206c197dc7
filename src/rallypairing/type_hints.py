"""Type hints used in Rally Pairing."""

from typing import Callable, Dict, List, Literal, Tuple

# Opaque participant identifier (normalised to str)
PlayerId = str
# Canonical unordered pair: (smaller id, larger id)
PairKey = Tuple[PlayerId, PlayerId]
# Ordered match list produced by the generator
Schedule = List["Match"]
# Completed-match counts keyed by participant id
MatchCounts = Dict[PlayerId, int]
# Called once per recorded result
ResultSink = Callable[["MatchOutcome"], None]

RoundPolicy = Literal["random", "proximity"]

#  LocalWords:  PairKey PlayerId
