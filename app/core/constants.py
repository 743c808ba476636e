"""Application constants.

Contains the match scoring weights and the role keywords used to classify
profiles as technical or business.
"""

# ---------------------------------------------------------------------------
# Match Scoring
# ---------------------------------------------------------------------------
BASE_MATCH_SCORE: int = 60
SKILL_OVERLAP_BONUS: int = 5
ROLE_SYNERGY_BONUS: int = 15
MIN_MATCH_SCORE: int = 40
MAX_MATCH_SCORE: int = 98

# ---------------------------------------------------------------------------
# Role Keywords
# Case-insensitive substrings; a role may match both groups.
# ---------------------------------------------------------------------------
TECH_ROLE_KEYWORDS: tuple[str, ...] = ("dev", "eng", "tech", "cto")
BIZ_ROLE_KEYWORDS: tuple[str, ...] = ("business", "marketing", "sales", "ceo")

# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------
USERS_TABLE: str = "users"
MATCHES_TABLE: str = "cofounder_matches"
MESSAGES_TABLE: str = "messages"

PROFILE_COLUMNS: str = "id, name, role, stage, skills, location, bio"

# Postgres SQLSTATE for unique_violation
UNIQUE_VIOLATION_CODE: str = "23505"

MAX_MESSAGE_LENGTH: int = 2000
