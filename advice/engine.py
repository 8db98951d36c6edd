"""
Engine facade: one invocation from raw repository facts (and optional intent) to advisory output.
"now" is snapshotted once here and threaded through every stage.
"""
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any
from models import ProfileIntent, Suggestion, HeuristicRecommendation
from normalize.models import RepositoryFact, NormalizedRepository, AggregateSignals
from normalize.util import compute_signals
from scoring.ranker import filter_and_rank_repos, extract_languages
from scoring.utils import DEFAULT_THRESHOLDS
from advice.suggestions import generate_suggestions
from advice.heuristics import generate_heuristic_recommendations
from log_config import get_logger

logger = get_logger(__name__)


class InspectionResult:
    """Everything one invocation produces. Advisory only; nothing has been applied."""

    def __init__(self, now: datetime, repos: List[NormalizedRepository], languages: List[str], signals: Optional[AggregateSignals], suggestions: List[Suggestion], recommendations: List[HeuristicRecommendation]):
        self.now = now
        self.repos = repos
        self.languages = languages
        self.signals = signals
        self.suggestions = suggestions
        self.recommendations = recommendations

    def advisories(self) -> list:
        """Suggestions followed by recommendations; list positions are the numbers shown to the user."""
        return list(self.suggestions) + list(self.recommendations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'now': self.now.isoformat(),
            'repos': [r.to_dict() for r in self.repos],
            'languages': list(self.languages),
            'signals': self.signals.to_dict() if self.signals else None,
            'suggestions': [s.to_dict() for s in self.suggestions],
            'recommendations': [r.to_dict() for r in self.recommendations],
        }


def inspect_facts(facts: Optional[List[RepositoryFact]], intent: ProfileIntent, now: Optional[datetime] = None, thresholds: Optional[dict] = None) -> InspectionResult:
    """
    Rank facts, derive signals, and generate suggestions and heuristic recommendations.

    facts=None means no fact source was consulted: no suggestions are produced and the heuristic
    engine runs without signals. An empty list means the source was consulted and returned nothing.
    """
    now = now or datetime.now(timezone.utc)
    th = thresholds or DEFAULT_THRESHOLDS

    if facts is None:
        recommendations = generate_heuristic_recommendations(intent, None, th)
        logger.debug('no facts supplied; %d recommendation(s)', len(recommendations))
        return InspectionResult(now, [], [], None, [], recommendations)

    repos = filter_and_rank_repos(facts)
    languages = extract_languages(repos)
    signals = compute_signals(repos, now, raw_facts=facts, languages=languages, thresholds=th)
    suggestions = generate_suggestions(repos, languages, now, th)
    recommendations = generate_heuristic_recommendations(intent, signals, th)
    logger.debug('ranked %d of %d repositories; %d suggestion(s), %d recommendation(s)', len(repos), len(facts), len(suggestions), len(recommendations))
    return InspectionResult(now, repos, languages, signals, suggestions, recommendations)
