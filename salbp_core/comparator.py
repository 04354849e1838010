from __future__ import annotations
from typing import Iterable

from .constants import VERDICT_MATCH, VERDICT_MISMATCH
from .models import ReferenceSolution, Station, Verdict


def compare_station_counts(stations: Iterable[Station], reference: ReferenceSolution) -> Verdict:
    """
    SALBP-1 minimises the number of stations, so only the counts are
    compared; which task sits in which station does not matter.
    """
    player = len(list(stations))
    ref = reference.station_count
    return Verdict(
        kind=VERDICT_MATCH if player == ref else VERDICT_MISMATCH,
        player_count=player,
        reference_count=ref,
    )
