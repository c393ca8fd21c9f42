"""Merge raw detector candidates into final anomaly records.

Candidates are grouped by ``(date, type)``. Independent signals on the same
day compound: a merged record's score is the sum of its members' scores and
its severity is the highest among them.
"""

from __future__ import annotations

import math
import uuid
from collections import defaultdict
from typing import Iterable

from stock_anomaly.types import (
    AnomalyCandidate,
    AnomalyId,
    AnomalyRecord,
    AnomalyType,
)

MERGED_PREFIX = "Multiple indicators"


def _canonical_key(candidate: AnomalyCandidate) -> tuple[float, str, str]:
    return (-candidate.score, candidate.detector, candidate.description)


def _new_id() -> AnomalyId:
    return AnomalyId(uuid.uuid4().hex)


def merge_group(members: list[AnomalyCandidate]) -> AnomalyRecord:
    """Collapse candidates sharing one ``(date, type)`` into a record.

    Members are first put in canonical order (score descending, then
    detector, then description), so the merged record does not depend on
    the order detectors finished in.

    :param members: Non-empty list of candidates with equal date and type.
    :returns: The merged record.
    """
    ordered = sorted(members, key=_canonical_key)
    first = ordered[0]

    if len(ordered) == 1:
        return AnomalyRecord(
            id=_new_id(),
            date=first.date,
            value=first.value,
            type=first.type,
            severity=first.severity,
            score=first.score,
            description=first.description,
            detectors=[first.detector],
            indicator_count=1,
        )

    severity = max((c.severity for c in ordered), key=lambda s: s.rank)
    description = f"{MERGED_PREFIX} ({len(ordered)}): " + "; ".join(
        c.description for c in ordered
    )
    return AnomalyRecord(
        id=_new_id(),
        date=first.date,
        value=first.value,
        type=first.type,
        severity=severity,
        score=math.fsum(c.score for c in ordered),
        description=description,
        detectors=[c.detector for c in ordered],
        indicator_count=len(ordered),
    )


def aggregate(candidates: Iterable[AnomalyCandidate]) -> list[AnomalyRecord]:
    """Group, merge and rank candidates.

    :param candidates: Candidates from any number of detectors.
    :returns: Records sorted by descending score; ties ordered by date then
        type.
    """
    groups: dict[tuple, list[AnomalyCandidate]] = defaultdict(list)
    for candidate in candidates:
        groups[(candidate.date, candidate.type)].append(candidate)

    records = [merge_group(groups[key]) for key in sorted(groups, key=_group_order)]
    records.sort(key=lambda r: -r.score)
    return records


def _group_order(key: tuple) -> tuple:
    date, kind = key
    return (date, kind == AnomalyType.VOLUME)


__all__ = ["aggregate", "merge_group", "MERGED_PREFIX"]
