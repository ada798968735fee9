from enum import Enum


class Sport(str, Enum):
    NBA = "NBA"
    NFL = "NFL"
    MLB = "MLB"
    NHL = "NHL"
    NCAAB = "NCAAB"
    NCAAF = "NCAAF"
    UFC = "UFC"
    PGA = "PGA"
    SOCCER = "Soccer"
    TENNIS = "Tennis"
    OTHER = "Other"


class EntityType(str, Enum):
    """Entity kinds carried by unresolved queue items."""

    TEAM = "team"
    PLAYER = "player"
    STAT = "stat"  # Bet/stat types, e.g. "Reb", "3pt"
    UNKNOWN = "unknown"


class EntityCategory(str, Enum):
    """Output of the team-vs-player classifier."""

    TEAM = "team"
    PLAYER = "player"
    UNKNOWN = "unknown"


class ResolverStatus(str, Enum):
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"
    AMBIGUOUS = "ambiguous"


class AmbiguityPolicy(str, Enum):
    """How aggregation keys treat ambiguous values."""

    UNRESOLVED_BUCKET = "unresolved_bucket"
    FIRST_CANDIDATE = "first_candidate"
