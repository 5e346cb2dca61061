"""Team name normalization for consistent matching across providers."""
import re
import unicodedata

import Levenshtein

# Club tokens that sources add or drop freely ("Liverpool FC", "Man Utd", "Stoke City")
CLUB_TOKENS = re.compile(r"\b(?:f\.c\.|fc|united|utd|city)(?=\W|$)")

def strip_accents(text: str) -> str:
    """Remove accents from unicode characters."""
    return "".join(c for c in unicodedata.normalize("NFD", text)
                   if unicodedata.category(c) != "Mn")

def normalize_team_name(name: str) -> str:
    """
    Normalize team name for identity comparison.

    Lowercases, drops the FC/United/Utd/City tokens as whole words and removes
    everything that is not a letter or digit, so "Manchester Utd." -> "manchester".
    """
    if not name:
        return ""

    normalized = strip_accents(str(name).lower().strip())
    normalized = CLUB_TOKENS.sub(" ", normalized)
    return re.sub(r"[^a-z0-9]", "", normalized)

def edit_distance_threshold(max_length: int) -> int:
    """Edits tolerated between two normalized names, scaled by the longer one."""
    if max_length > 10:
        return 3
    if max_length > 5:
        return 2
    return 1

def names_match(name1: str, name2: str) -> bool:
    """
    Decide whether two team names refer to the same team.

    Exact match, containment ("man" in "manchester") or a small edit distance
    all count. This is a heuristic: false positives such as two clubs of the
    same city sharing a stem are possible.
    """
    norm1 = normalize_team_name(name1)
    norm2 = normalize_team_name(name2)

    if norm1 == norm2:
        return True

    # An empty name would be a substring of everything
    if not norm1 or not norm2:
        return False

    if norm1 in norm2 or norm2 in norm1:
        return True

    distance = Levenshtein.distance(norm1, norm2)
    return distance <= edit_distance_threshold(max(len(norm1), len(norm2)))
