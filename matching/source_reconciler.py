"""Merge same-match records from independent feeds into canonical records."""
import logging
from dataclasses import fields, replace
from functools import reduce
from typing import Iterable, List, Optional

from core.models import MatchRecord
from matching.team_normalizer import names_match

logger = logging.getLogger(__name__)

# Identity and provenance are never filled from another feed
_NON_MERGED_FIELDS = {"source", "home_team", "away_team", "tips"}


def find_matching_record(records: List[MatchRecord], home_team: str, away_team: str) -> Optional[int]:
    """Index of the first record whose home AND away teams match, or None."""
    for idx, record in enumerate(records):
        if names_match(record.home_team, home_team) and names_match(record.away_team, away_team):
            return idx
    return None


def fill_forward(existing: MatchRecord, incoming: MatchRecord) -> MatchRecord:
    """
    Return a copy of `existing` with its empty fields taken from `incoming`.

    A field is written only when the existing value is falsy (None, 0, "", [])
    and the incoming one is not; present values are never overwritten.
    Tips from both feeds are kept, existing keys first.
    """
    updates = {}
    for f in fields(MatchRecord):
        if f.name in _NON_MERGED_FIELDS:
            continue
        current = getattr(existing, f.name)
        offered = getattr(incoming, f.name)
        if not current and offered:
            updates[f.name] = list(offered) if isinstance(offered, list) else offered

    tips = dict(incoming.tips)
    tips.update(existing.tips)
    updates["tips"] = tips

    return replace(existing, **updates)


def merge_records(primary: List[MatchRecord], secondary: List[MatchRecord]) -> List[MatchRecord]:
    """
    Merge one supplementary feed into the accumulated records.

    Each secondary record is matched by team identity against the accumulating
    list (including records appended earlier in this pass). Matches are filled
    forward; unmatched records are appended as new fixtures. Inputs are not mutated.
    """
    merged = list(primary)
    appended = 0

    for record in secondary:
        idx = find_matching_record(merged, record.home_team, record.away_team)
        if idx is None:
            merged.append(replace(record, tips=dict(record.tips)))
            appended += 1
        else:
            merged[idx] = fill_forward(merged[idx], record)

    logger.debug(
        f"Merged {len(secondary)} records: {len(secondary) - appended} matched, {appended} appended"
    )
    return merged


def reconcile_sources(sources: Iterable[List[MatchRecord]]) -> List[MatchRecord]:
    """
    Fold feeds in precedence order into canonical match records.

    The first feed seeds the result as-is; every later feed is merged with
    merge_records.
    """
    feeds = list(sources)
    if not feeds:
        return []
    seed = [replace(r, tips=dict(r.tips)) for r in feeds[0]]
    reconciled = reduce(merge_records, feeds[1:], seed)
    logger.info(f"Reconciled {sum(len(f) for f in feeds)} source records into {len(reconciled)} matches")
    return reconciled
