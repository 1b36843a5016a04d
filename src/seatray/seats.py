"""Left/right window seat recommendation."""

import logging
from collections.abc import Sequence

from seatray.events import classify_side, relative_angle
from seatray.geodesy import initial_bearing
from seatray.models import RouteSample, SeatRecommendation

logger = logging.getLogger(__name__)


def recommend_seat(samples: Sequence[RouteSample]) -> SeatRecommendation:
    """Pick the side that faces the sun for more of the flight.

    Each sample but the last counts once when the sun is at or above the
    horizon; sun ahead or behind counts for neither side. Equal non-zero
    counts favour the left side.
    """
    left = right = 0
    visible = False
    for p1, p2 in zip(samples, samples[1:]):
        if p1.altitude < 0:
            continue
        visible = True
        side = classify_side(relative_angle(p1.azimuth, initial_bearing(p1.position, p2.position)))
        if side == "left":
            left += 1
        elif side == "right":
            right += 1

    logger.debug("Sun exposure: left=%d right=%d visible=%s", left, right, visible)
    if not visible:
        return SeatRecommendation("none", "not-visible")
    if left > right:
        return SeatRecommendation("left", "visible", left, right)
    if right > left:
        return SeatRecommendation("right", "visible", left, right)
    if left > 0:
        return SeatRecommendation("left", "visible", left, right)
    return SeatRecommendation("none", "visible", left, right)
