"""
Geographic coverage scoring.

Cities in Annexure A are automatic declines. Everywhere else the score is
the sum of city coverage points and regional cluster points, capped at 100.
"""

from typing import Optional, Tuple

from .models import ApplicationRecord, ModuleResult

MODULE_NAME = "city"

ANNEXURE_A_AREAS: Tuple[str, ...] = (
    "quetta", "peshawar", "d.i.khan", "bannu", "kohat", "mardan",
    "mingora", "swat", "abbottabad", "mansehra", "gilgit", "skardu",
    "muzaffarabad", "mirpur", "rawalakot", "kotli", "bhimber",
    "parachinar", "kuram", "waziristan", "mohmand", "bajour",
    "dir", "chitral", "kurram", "orakzai", "khyber",
)

# Ordered: the first entry contained in a city name wins
FULL_COVERAGE_CITIES: Tuple[Tuple[str, int], ...] = (
    ("karachi", 40), ("lahore", 40), ("islamabad", 40), ("rawalpindi", 40),
    ("faisalabad", 20), ("multan", 20), ("gujranwala", 20), ("sialkot", 20),
    ("hyderabad", 20), ("sukkur", 20), ("larkana", 20),
    ("bahawalpur", 0), ("sargodha", 0), ("sheikhupura", 0), ("jhang", 0),
    ("kasur", 0), ("okara", 0), ("sahiwal", 0), ("gujrat", 0), ("jhelum", 0),
    ("attock", 0), ("chakwal", 0), ("mianwali", 0), ("khushab", 0),
)

CLUSTER_POINTS = {
    "FEDERAL": 30,
    "SOUTH": 25,
    "NORTHERN_PUNJAB": 20,
    "NORTH": 15,
    "SOUTHERN_PUNJAB": 10,
    "KP": 5,
}


def is_annexure_a(city: str) -> bool:
    """Case-insensitive substring match against the Annexure A list."""
    city = city.lower()
    return bool(city) and any(area in city for area in ANNEXURE_A_AREAS)


def lookup_city(city: str) -> Optional[Tuple[str, int]]:
    city = city.lower()
    if not city:
        return None
    for name, points in FULL_COVERAGE_CITIES:
        if name in city:
            return name, points
    return None


def cluster_tier(points: int) -> str:
    if points >= 25:
        return "PREMIUM"
    if points >= 15:
        return "STANDARD"
    if points >= 5:
        return "BASIC"
    return "LIMITED"


def coverage_level(city_points: int) -> str:
    if city_points >= 40:
        return "FULL_PREMIUM"
    if city_points >= 20:
        return "FULL_STANDARD"
    if city_points == 0:
        return "BASIC"
    return "LIMITED"


def geography_risk_level(score: float) -> str:
    if score >= 80:
        return "LOW"
    if score >= 60:
        return "MEDIUM"
    if score >= 40:
        return "HIGH"
    return "VERY_HIGH"


def city_points(curr_city: str, office_city: str) -> Tuple[Optional[str], int]:
    """Coverage points, checking the current city before the office city."""
    for city in (curr_city, office_city):
        match = lookup_city(city)
        if match is not None:
            return match
    return None, 0


def score_geography(application: ApplicationRecord) -> ModuleResult:
    """
    Score geographic coverage for the applicant's current and office city.

    Args:
        application: Normalized application

    Returns:
        ModuleResult; an Annexure A hit returns score 0 with ``hard_stop`` set
    """
    current, office, cluster = application.curr_city, application.office_city, application.cluster
    current_hit = is_annexure_a(current)
    office_hit = is_annexure_a(office)

    if current_hit or office_hit:
        which = "Current" if current_hit else "Office"
        return ModuleResult(
            name=MODULE_NAME,
            score=0,
            notes=(f"Annexure A area detected ({which} City) - Automatic Fail",),
            flags=("ANNEXURE_A",),
            details={
                "currentCity": current,
                "officeCity": office,
                "annexureAHit": True,
                "currentCityStatus": "ANNEXURE_A" if current_hit else "SAFE",
                "officeCityStatus": "ANNEXURE_A" if office_hit else "SAFE",
                "clusterInfo": {"name": cluster or "UNKNOWN", "points": 0, "tier": "RESTRICTED"},
                "coverageLevel": "RESTRICTED",
                "riskLevel": "VERY_HIGH",
            },
            hard_stop=True,
        )

    found, points = city_points(current, office)
    cluster_score = CLUSTER_POINTS.get(cluster, 0)
    total = min(100, points + cluster_score)
    status = "COVERED" if found else "LIMITED_COVERAGE"

    return ModuleResult(
        name=MODULE_NAME,
        score=total,
        notes=(
            f"City: {found or 'Not in full coverage'} ({points} points)",
            f"Cluster: {cluster or 'UNKNOWN'} ({cluster_score} points)",
            f"Total: {total}/100",
        ),
        details={
            "currentCity": current,
            "officeCity": office,
            "annexureAHit": False,
            "cityScore": points,
            "clusterScore": cluster_score,
            "foundCity": found,
            "currentCityStatus": status,
            "officeCityStatus": status,
            "clusterInfo": {
                "name": cluster or "UNKNOWN",
                "points": cluster_score,
                "tier": cluster_tier(cluster_score),
            },
            "coverageLevel": coverage_level(points),
            "riskLevel": geography_risk_level(total),
        },
    )
