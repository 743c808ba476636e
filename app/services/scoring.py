"""Heuristic co-founder compatibility score.

``score`` starts from a base value, adds a bonus per shared skill and a
bonus for complementary technical/business roles, then clamps the result.
"""

from __future__ import annotations

from app.core.constants import (
    BASE_MATCH_SCORE,
    BIZ_ROLE_KEYWORDS,
    MAX_MATCH_SCORE,
    MIN_MATCH_SCORE,
    ROLE_SYNERGY_BONUS,
    SKILL_OVERLAP_BONUS,
    TECH_ROLE_KEYWORDS,
)
from app.models.enums import RoleCategory
from app.models.profile import UserProfile


def is_tech_role(role: str | None) -> bool:
    lowered = (role or "").lower()
    return any(keyword in lowered for keyword in TECH_ROLE_KEYWORDS)


def is_biz_role(role: str | None) -> bool:
    lowered = (role or "").lower()
    return any(keyword in lowered for keyword in BIZ_ROLE_KEYWORDS)


def classify_role(role: str | None) -> set[RoleCategory]:
    """Return every category the role string matches (possibly both)."""
    categories: set[RoleCategory] = set()
    if is_tech_role(role):
        categories.add(RoleCategory.tech)
    if is_biz_role(role):
        categories.add(RoleCategory.biz)
    return categories


def has_role_synergy(viewer_role: str | None, candidate_role: str | None) -> bool:
    """True when one side is technical and the other business, either way."""
    viewer = classify_role(viewer_role)
    candidate = classify_role(candidate_role)
    return (RoleCategory.tech in viewer and RoleCategory.biz in candidate) or (
        RoleCategory.biz in viewer and RoleCategory.tech in candidate
    )


def score(viewer: UserProfile, candidate: UserProfile) -> int:
    """Compute the match score of ``candidate`` for ``viewer``.

    Deterministic and side-effect free.  Always within
    ``[MIN_MATCH_SCORE, MAX_MATCH_SCORE]``.
    """
    common_skills = set(viewer.skills) & set(candidate.skills)
    total = BASE_MATCH_SCORE + SKILL_OVERLAP_BONUS * len(common_skills)

    if has_role_synergy(viewer.role, candidate.role):
        total += ROLE_SYNERGY_BONUS

    return max(MIN_MATCH_SCORE, min(MAX_MATCH_SCORE, total))
