"""
Normalization utility helpers.
Coerce raw repository facts into the canonical shape and derive aggregate signals.
"""
from datetime import datetime, timezone
from typing import List, Optional
from normalize.models import RepositoryFact, NormalizedRepository, AggregateSignals, UNKNOWN_LANGUAGE
from scoring.utils import DEFAULT_THRESHOLDS
from log_config import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24


def normalize_repo(raw: RepositoryFact) -> NormalizedRepository:
    """Create a NormalizedRepository from a raw fact.
    Missing description becomes '' and missing language becomes 'Unknown'; the timestamp is passed through.
    """
    return NormalizedRepository(
        name=raw.name,
        description=raw.description or '',
        language=raw.language or UNKNOWN_LANGUAGE,
        stars=raw.stars,
        last_updated=raw.updated_at,
    )


def normalize_repos(raws: List[RepositoryFact]) -> List[NormalizedRepository]:
    return [normalize_repo(r) for r in raws or []]


def as_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (trailing 'Z' allowed). Returns None when unparseable."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def days_since(timestamp: Optional[str], now: datetime) -> Optional[float]:
    parsed = parse_timestamp(timestamp)
    if parsed is None:
        return None
    return (as_utc(now) - parsed).total_seconds() / SECONDS_PER_DAY


def is_recent(repo: NormalizedRepository, now: datetime, recent_days: int = DEFAULT_THRESHOLDS['recent_days']) -> bool:
    """True if the repository was modified within recent_days of now. Unparseable timestamps are not recent."""
    age = days_since(repo.last_updated, now)
    return age is not None and age <= recent_days


def recent_repos(repos: List[NormalizedRepository], now: datetime, recent_days: int = DEFAULT_THRESHOLDS['recent_days']) -> List[NormalizedRepository]:
    return [r for r in repos if is_recent(r, now, recent_days)]


def has_recent_activity(repos: List[NormalizedRepository], now: datetime, recent_days: int = DEFAULT_THRESHOLDS['recent_days']) -> bool:
    return any(is_recent(r, now, recent_days) for r in repos)


def total_stars(repos: List[NormalizedRepository]) -> int:
    return sum(r.stars for r in repos)


def fork_ratio(raws: Optional[List[RepositoryFact]]) -> float:
    """Fraction of retrieved records that are forks; 0.0 when nothing was retrieved.

    The denominator counts every retrieved record while AggregateSignals.repo_count counts only
    ranked (non-fork) ones. With the default thresholds (ratio > 0.7, repo_count > 2) the forks
    warning therefore needs at least 3 original repositories and at least 11 records in total.
    """
    if not raws:
        return 0.0
    return sum(1 for r in raws if r.fork) / len(raws)


def compute_signals(ranked: List[NormalizedRepository], now: datetime, raw_facts: Optional[List[RepositoryFact]] = None, languages: Optional[List[str]] = None, thresholds: Optional[dict] = None) -> AggregateSignals:
    """
    Derive AggregateSignals from the filtered, ranked repositories.

    raw_facts, when given, is the unfiltered retrieval result and is only used for the fork ratio
    (forks never survive ranking, so the ratio cannot be computed from the ranked set).
    """
    th = thresholds or DEFAULT_THRESHOLDS
    if languages is None:
        # local import: scoring.ranker depends on this module
        from scoring.ranker import extract_languages
        languages = extract_languages(ranked)
    signals = AggregateSignals(
        repo_count=len(ranked),
        has_recent_activity=has_recent_activity(ranked, now, th['recent_days']),
        languages=languages,
        total_stars=total_stars(ranked),
        fork_ratio=fork_ratio(raw_facts),
        top_repos=ranked[:th['top_repos_limit']],
    )
    logger.debug('signals: repos=%d recent=%s stars=%d fork_ratio=%.2f', signals.repo_count, signals.has_recent_activity, signals.total_stars, signals.fork_ratio)
    return signals
