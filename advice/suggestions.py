"""
Suggestion generation from ranked repositories.

Rules are evaluated in table order and every rule whose predicate holds contributes its
suggestions; the order of the table is the display order. Nothing here applies a suggestion.
"""
from datetime import datetime
from typing import List, Optional
from models import Suggestion
from normalize.models import NormalizedRepository
from normalize.util import recent_repos
from scoring.utils import DEFAULT_THRESHOLDS
from log_config import get_logger

logger = get_logger(__name__)

DEFAULT_PROJECT_IMPACT = 'A project on GitHub'


class SuggestionContext:
    """Inputs shared by every suggestion rule for one invocation."""

    def __init__(self, repos: List[NormalizedRepository], languages: List[str], now: datetime, thresholds: dict):
        self.repos = repos
        self.languages = languages
        self.now = now
        self.thresholds = thresholds
        self.top_repos = repos[:thresholds['top_repos_limit']]
        self.recent_repos = recent_repos(repos, now, thresholds['recent_days'])


def _feature_top_repos(ctx: SuggestionContext) -> List[Suggestion]:
    names = ', '.join(r.name for r in ctx.top_repos)
    return [Suggestion('repo', f"We recommend featuring these repositories: {names}", {'repos': list(ctx.top_repos)})]


def _no_repositories(ctx: SuggestionContext) -> List[Suggestion]:
    return [Suggestion('warning', 'No public repositories found for this user.')]


def _no_recent_activity(ctx: SuggestionContext) -> List[Suggestion]:
    months = round(ctx.thresholds['recent_days'] / 30)
    return [Suggestion('warning', f"Your profile has no recently active repositories (last {months} months).")]


def _detected_languages(ctx: SuggestionContext) -> List[Suggestion]:
    return [Suggestion('section', f"Primary languages detected: {', '.join(ctx.languages)}", {'languages': list(ctx.languages)})]


def _featured_project_candidates(ctx: SuggestionContext) -> List[Suggestion]:
    return [
        Suggestion(
            'repo',
            f'Add "{repo.name}" to featured projects',
            {'project': {'name': repo.name, 'impact': repo.description or DEFAULT_PROJECT_IMPACT}},
        )
        for repo in ctx.top_repos
    ]


# (rule name, predicate, builder) in evaluation and display order
SUGGESTION_RULES = [
    ('feature_top_repos', lambda ctx: bool(ctx.repos), _feature_top_repos),
    ('no_repositories', lambda ctx: not ctx.repos, _no_repositories),
    ('no_recent_activity', lambda ctx: bool(ctx.repos) and not ctx.recent_repos, _no_recent_activity),
    ('detected_languages', lambda ctx: bool(ctx.languages), _detected_languages),
    ('featured_project_candidates', lambda ctx: bool(ctx.top_repos), _featured_project_candidates),
]


def generate_suggestions(repos: List[NormalizedRepository], languages: List[str], now: datetime, thresholds: Optional[dict] = None) -> List[Suggestion]:
    """
    Generate suggestions for a ranked repository list.

    Parameters:
        repos: repositories as returned by scoring.ranker.filter_and_rank_repos (rank order matters).
        languages: detected languages, as returned by scoring.ranker.extract_languages.
        now: the invocation's single snapshot of the current time, used for the recency window.
        thresholds: optional threshold overrides; defaults to scoring.utils.DEFAULT_THRESHOLDS.

    Returns:
        List[Suggestion]: ordered by display priority.
    """
    ctx = SuggestionContext(list(repos or []), list(languages or []), now, thresholds or DEFAULT_THRESHOLDS)
    suggestions: List[Suggestion] = []
    for name, predicate, build in SUGGESTION_RULES:
        if predicate(ctx):
            produced = build(ctx)
            logger.debug('suggestion rule %s produced %d item(s)', name, len(produced))
            suggestions.extend(produced)
    return suggestions
