"""
Repository ranking: drop repositories that should not represent the person, then order the rest.
Purely deterministic; no inference of any kind.
"""
from typing import List
from normalize.models import RepositoryFact, NormalizedRepository, UNKNOWN_LANGUAGE
from normalize.util import normalize_repos
from log_config import get_logger

logger = get_logger(__name__)


def is_presentable(fact: RepositoryFact) -> bool:
    """Forks, archived and empty repositories are not treated as original, presentable work."""
    if fact.fork:
        return False
    if fact.archived:
        return False
    if fact.size <= 0:
        return False
    return True


def _rank_key(fact: RepositoryFact):
    return fact.stars, fact.updated_at or ''


def filter_and_rank_repos(facts: List[RepositoryFact]) -> List[NormalizedRepository]:
    """
    Filter and rank repositories.

    Order: stars descending, then updated_at descending by plain string comparison. The string
    comparison is only chronological while every timestamp shares one ISO-8601 format, precision
    and UTC offset (which is what the GitHub API returns). Exact ties keep their input order
    since sorted() is stable and reverse=True preserves the order of equal elements.
    """
    kept = [f for f in facts or [] if is_presentable(f)]
    dropped = len(facts or []) - len(kept)
    if dropped:
        logger.debug('dropped %d fork/archived/empty repositories', dropped)
    ranked = sorted(kept, key=_rank_key, reverse=True)
    return normalize_repos(ranked)


def extract_languages(repos: List[NormalizedRepository]) -> List[str]:
    """Unique primary languages in first-seen order, excluding the 'Unknown' sentinel."""
    seen = {}
    for r in repos:
        if r.language and r.language != UNKNOWN_LANGUAGE:
            seen.setdefault(r.language, None)
    return list(seen)
