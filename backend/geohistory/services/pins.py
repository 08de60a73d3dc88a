import random
from typing import Optional
from math import pi

from ..models.game import Coordinates
from .geodesy import destination_point


def generate_random_pin(
    target: Coordinates,
    min_distance_km: float,
    max_distance_km: float,
    rng: Optional[random.Random] = None
) -> Coordinates:
    """
    Place a starting pin somewhere in the ring around target.
    
    Args:
        target: The round's answer location
        min_distance_km: Inner radius of the ring
        max_distance_km: Outer radius of the ring (must not be below the inner one)
        rng: Random source, the module-level generator when omitted
        
    Returns:
        A point whose great circle distance from target is within the ring
    """
    rng = rng or random
    bearing = rng.random() * 2 * pi
    distance = min_distance_km + rng.random() * (max_distance_km - min_distance_km)
    return destination_point(target, bearing, distance)
