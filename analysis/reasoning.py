"""Human-readable justification shared by both scoring engines."""
from typing import List, Tuple


def compose_reasoning(reasons: List[Tuple[str, str]], subject: str) -> Tuple[str, List[str]]:
    """
    Join (sentence, tag) pairs into a reasoning string and a key-factor list.

    Falls back to a generic statement about `subject` when no factor qualified.
    """
    sentences = [sentence for sentence, _ in reasons]
    key_factors = [tag for _, tag in reasons if tag]

    if sentences:
        return ". ".join(sentences) + ".", key_factors
    return (
        f"Based on statistical analysis, {subject} has a favorable profile for this match.",
        key_factors,
    )
