"""Best-hit allele calling from KMA alignment results.

KMA reports one row per template (``<locus>-<allele>``) with an alignment
score, and several templates of the same locus usually compete. Each locus
keeps the allele with the highest score. On a tie the allele seen first is
kept, so the call depends on the order of the hit records.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

import pandas as pd

from sttyper.core.errors import MalformedHitRecord


@dataclass(frozen=True)
class AlleleCall:
    locus: str
    allele: int
    score: int


def _is_number(value):
    return value.isascii() and value.isdigit()


def parse_hit_id(identifier, record_index=0) -> Tuple[str, int]:
    """Split a ``locus-allele`` template name into (locus, allele).

    The split happens on the last hyphen, so ``glnA-like-12`` gives
    ``('glnA-like', 12)``.
    """
    text = str(identifier).strip()
    locus, sep, allele = text.rpartition('-')
    if not sep or not locus:
        raise MalformedHitRecord(record_index, text, 'expected <locus>-<allele>')
    if not _is_number(allele):
        raise MalformedHitRecord(record_index, text, 'allele is not a non-negative integer')
    return locus, int(allele)


def _parse_score(score, record_index):
    if isinstance(score, bool):
        raise MalformedHitRecord(record_index, repr(score), 'score is not an integer')
    if isinstance(score, int):
        if score < 0:
            raise MalformedHitRecord(record_index, str(score), 'score is negative')
        return score
    text = str(score).strip()
    if not _is_number(text):
        raise MalformedHitRecord(record_index, text, 'score is not a non-negative integer')
    return int(text)


def call_alleles(hits: Iterable[Tuple[str, object]]) -> Dict[str, AlleleCall]:
    """Reduce hit records to the single best allele per locus.

    Parameters:
        hits: Iterable of (``locus-allele`` identifier, score) pairs, in the
            order KMA reported them.

    Returns:
        dict: locus name -> AlleleCall, in first-seen locus order.

    Raises:
        MalformedHitRecord: If an identifier or score cannot be parsed.
    """
    calls: Dict[str, AlleleCall] = {}
    for record_index, (identifier, score) in enumerate(hits, start=1):
        locus, allele = parse_hit_id(identifier, record_index)
        score = _parse_score(score, record_index)
        current = calls.get(locus)
        # strictly greater; the first-seen allele wins a tie
        if current is None or score > current.score:
            calls[locus] = AlleleCall(locus=locus, allele=allele, score=score)
    return calls


def order_calls(calls: Dict[str, AlleleCall], loci: Sequence[str]) -> List[Tuple[str, int]]:
    """Project calls onto the schema order, omitting loci without evidence."""
    return [(locus, calls[locus].allele) for locus in loci if locus in calls]


def read_hits(path) -> List[Tuple[str, str]]:
    """Read (template, score) pairs from a KMA ``.res`` file."""
    try:
        df = pd.read_csv(path, sep='\t', dtype=str, na_filter=False)
    except pd.errors.EmptyDataError as exc:
        raise MalformedHitRecord(0, str(path), 'empty result table') from exc
    if df.shape[1] < 2:
        raise MalformedHitRecord(0, str(path), 'expected at least a template and a score column')
    df.columns = [str(c).strip() for c in df.columns]
    score_col = 'Score' if 'Score' in df.columns else df.columns[1]
    templates = df.iloc[:, 0].str.strip()
    scores = df[score_col].str.strip()
    return list(zip(templates.tolist(), scores.tolist()))


__all__ = [
    'AlleleCall',
    'parse_hit_id',
    'call_alleles',
    'order_calls',
    'read_hits',
]
