import math
from typing import Iterable, Optional


def _item_score(item) -> Optional[float]:
    score = item.get("score") if isinstance(item, dict) else getattr(item, "score", None)
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    if math.isnan(score):
        return None
    return float(score)


def compute_overall_score(items: Iterable) -> Optional[float]:
    """Mean of the non-null item scores, rounded to 2 decimals.

    Self scores are not part of the aggregate. Returns None when no item
    carries a score.
    """
    scores = [s for s in (_item_score(i) for i in items or []) if s is not None]
    if not scores:
        return None
    return round(sum(scores) / len(scores), 2)


def derive_category(course: Optional[str]) -> str:
    """Category token from a course name, e.g. "CIA: Opening" -> "CIA".

    Not applied on write; items keep whatever category the caller sent.
    """
    if not course:
        return "GENERAL"
    left = course.split(":")[0].strip()
    tokens = left.split()
    return tokens[0].upper() if tokens else "GENERAL"
