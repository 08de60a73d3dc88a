# Upper distance bound (km, inclusive) and the points it earns
PIN_SCORE_THRESHOLDS = (
    (20, 10),
    (40, 8),
    (100, 6),
    (150, 4),
    (250, 2),
    (500, 1),
)

MAX_PIN_POINTS = PIN_SCORE_THRESHOLDS[0][1]
POINTS_PER_CORRECT_ANSWER = 1


def calculate_score(distance_km: float) -> int:
    """
    Calculate pin score based on distance from the actual location.
    
    Scoring system:
    - <= 20km: 10 points
    - <= 40km: 8 points
    - <= 100km: 6 points
    - <= 150km: 4 points
    - <= 250km: 2 points
    - <= 500km: 1 point
    - further: 0 points
    
    Args:
        distance_km: Non-negative distance in kilometers
        
    Returns:
        Score (0 to 10)
    """
    for limit, points in PIN_SCORE_THRESHOLDS:
        if distance_km <= limit:
            return points
    return 0


def max_possible_score(total_rounds: int, follow_ups_per_round: int = 5) -> int:
    """Best achievable total: a perfect pin plus every follow-up right, each round."""
    return total_rounds * MAX_PIN_POINTS + total_rounds * follow_ups_per_round * POINTS_PER_CORRECT_ANSWER
