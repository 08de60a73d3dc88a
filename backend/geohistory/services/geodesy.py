from math import radians, degrees, sin, cos, sqrt, atan2, asin

from ..models.game import Coordinates

# Earth's mean radius in kilometers
EARTH_RADIUS_KM = 6371.0


def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """
    Calculate the great circle distance between two points on Earth.
    
    Args:
        a, b: Points to measure between (degrees)
        
    Returns:
        Distance in kilometers
    """
    lat1_rad = radians(a.lat)
    lat2_rad = radians(b.lat)
    dlat = lat2_rad - lat1_rad
    dlon = radians(b.lng - a.lng)
    
    h = sin(dlat / 2)**2 + cos(lat1_rad) * cos(lat2_rad) * sin(dlon / 2)**2
    # Rounding can push h a hair past 1 for antipodal points
    h = min(1.0, h)
    c = 2 * atan2(sqrt(h), sqrt(1 - h))
    
    return EARTH_RADIUS_KM * c


def destination_point(origin: Coordinates, bearing: float, distance_km: float) -> Coordinates:
    """
    Walk along a great circle from origin.
    
    Args:
        origin: Starting point (degrees)
        bearing: Initial bearing in radians, clockwise from north
        distance_km: Distance to travel in kilometers
        
    Returns:
        The destination point, longitude wrapped to [-180, 180]
    """
    angular = distance_km / EARTH_RADIUS_KM
    lat1 = radians(origin.lat)
    lng1 = radians(origin.lng)
    
    sin_lat2 = sin(lat1) * cos(angular) + cos(lat1) * sin(angular) * cos(bearing)
    lat2 = asin(max(-1.0, min(1.0, sin_lat2)))
    lng2 = lng1 + atan2(
        sin(bearing) * sin(angular) * cos(lat1),
        cos(angular) - sin(lat1) * sin(lat2)
    )
    
    lng = (degrees(lng2) + 540) % 360 - 180
    return Coordinates(lat=degrees(lat2), lng=lng)
