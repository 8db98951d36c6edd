"""
Heuristic recommendations: section visibility, tone and warnings.

Combines the declared ProfileIntent with AggregateSignals (None when no repository facts were
consulted). Three rule families are evaluated independently and concatenated in the order
section, tone, warning. Inside a family every rule is tested in table order and any number may
fire; there is no early exit. Rules with signal-dependent predicates simply do not fire when
signals is None.

Every recommendation carries an explanation. Recommendations with a suggested action can be
applied with advice.resolver.apply_advisory; the others are informational.
"""
from typing import List, Optional
from models import ProfileIntent, HeuristicRecommendation, SuggestedAction, PLACEHOLDER_NAME
from normalize.models import AggregateSignals
from scoring.utils import DEFAULT_THRESHOLDS
from log_config import get_logger

logger = get_logger(__name__)


class HeuristicsContext:
    def __init__(self, intent: ProfileIntent, signals: Optional[AggregateSignals], thresholds: dict):
        self.intent = intent
        self.signals = signals
        self.thresholds = thresholds

    @property
    def has_signals(self) -> bool:
        return self.signals is not None

    @property
    def recent_months(self) -> int:
        return round(self.thresholds['recent_days'] / 30)

    def strong_repos(self):
        if self.signals is None:
            return []
        return [r for r in self.signals.top_repos if r.stars >= self.thresholds['strong_repo_stars']]


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


# --- section rules ---

def _no_active_repos(ctx: HeuristicsContext) -> bool:
    s = ctx.signals
    return s is not None and ctx.intent.sections.get('projects', False) and (
        s.repo_count == 0 or (not s.has_recent_activity and not s.top_repos)
    )


def _rec_hide_projects_no_repos(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'section',
        'Consider hiding the Featured Projects section',
        'Your GitHub profile shows no active repositories. A projects section without content may weaken your profile.',
        SuggestedAction('disable', 'projects', False),
    )


def _strong_repos_hidden(ctx: HeuristicsContext) -> bool:
    return ctx.has_signals and not ctx.intent.sections.get('projects', False) and len(ctx.strong_repos()) >= ctx.thresholds['strong_repo_min_count']


def _rec_show_projects(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'section',
        'Consider enabling the Featured Projects section',
        f"You have {len(ctx.strong_repos())} repositories with {ctx.thresholds['strong_repo_stars']}+ stars. "
        'Showcasing these could strengthen your profile.',
        SuggestedAction('enable', 'projects', True),
    )


def _no_languages_tech_hidden(ctx: HeuristicsContext) -> bool:
    return ctx.has_signals and not ctx.signals.languages and not ctx.intent.sections.get('techStack', False)


def _rec_manual_tech_stack(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'section',
        'Consider adding a Tech Stack section manually',
        'No programming languages were detected from your repositories. '
        'Adding your skills manually will help visitors understand your expertise.',
        SuggestedAction('enable', 'techStack', True),
    )


def _languages_but_empty_stack(ctx: HeuristicsContext) -> bool:
    return ctx.has_signals and bool(ctx.signals.languages) and not ctx.intent.tech_stack


def _rec_populate_tech_stack(ctx: HeuristicsContext) -> HeuristicRecommendation:
    languages = ctx.signals.languages
    return HeuristicRecommendation(
        'section',
        'Your tech stack is empty but we detected languages',
        f"Languages like {', '.join(languages[:3])} were found in your repos. Consider adding them to your tech stack.",
        SuggestedAction('change', 'techStack', languages[:ctx.thresholds['tech_stack_suggestion_limit']]),
    )


def _projects_enabled_but_empty(ctx: HeuristicsContext) -> bool:
    return not ctx.has_signals and ctx.intent.sections.get('projects', False) and not ctx.intent.featured_projects


def _rec_fill_or_hide_projects(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'section',
        'Add featured projects or hide the section',
        'The Featured Projects section is enabled but empty. Either add projects manually or consider hiding this section.',
        SuggestedAction('disable', 'projects', False),
    )


def _tech_stack_enabled_but_empty(ctx: HeuristicsContext) -> bool:
    return not ctx.has_signals and ctx.intent.sections.get('techStack', False) and not ctx.intent.tech_stack


def _rec_fill_tech_stack(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'section',
        'Add technologies to your tech stack',
        'The Tech Stack section is enabled but empty. Add your skills to help visitors understand your expertise.',
    )


SECTION_RULES = [
    ('hide_projects_without_repos', _no_active_repos, _rec_hide_projects_no_repos),
    ('show_projects_for_strong_repos', _strong_repos_hidden, _rec_show_projects),
    ('manual_tech_stack', _no_languages_tech_hidden, _rec_manual_tech_stack),
    ('populate_tech_stack', _languages_but_empty_stack, _rec_populate_tech_stack),
    ('fill_or_hide_projects', _projects_enabled_but_empty, _rec_fill_or_hide_projects),
    ('fill_tech_stack', _tech_stack_enabled_but_empty, _rec_fill_tech_stack),
]


# --- tone rules ---

def _tone_change(tone: str) -> SuggestedAction:
    return SuggestedAction('change', 'tone', tone)


def _student_low_activity(ctx: HeuristicsContext) -> bool:
    quiet = not ctx.has_signals or not ctx.signals.has_recent_activity
    return ctx.intent.career_stage == 'student' and quiet and ctx.intent.tone != 'friendly'


def _rec_student_friendly(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'tone',
        'Consider a friendly, learning-focused tone',
        'As a student with limited visible activity, a friendly tone emphasizing learning and growth '
        'can be more authentic and engaging.',
        _tone_change('friendly'),
    )


def _popular_and_active(ctx: HeuristicsContext) -> bool:
    s = ctx.signals
    return (
        s is not None
        and s.total_stars >= ctx.thresholds['high_star_total']
        and s.has_recent_activity
        and ctx.intent.tone in ('minimal', 'friendly')
    )


def _rec_confident_for_impact(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'tone',
        'Consider a more confident tone',
        f"Your projects have {ctx.signals.total_stars} total stars and recent activity. "
        'A confident tone can better reflect your impact.',
        _tone_change('confident'),
    )


def _open_source_minimal(ctx: HeuristicsContext) -> bool:
    return ctx.intent.profile_goal == 'open-source' and ctx.intent.tone == 'minimal'


def _rec_open_source_friendly(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'tone',
        'Consider a friendlier tone for open-source',
        'Open-source contributions benefit from an approachable, community-focused tone that invites collaboration.',
        _tone_change('friendly'),
    )


def _founder_without_founder_tone(ctx: HeuristicsContext) -> bool:
    return ctx.intent.career_stage == 'founder' and ctx.intent.tone != 'founder'


def _rec_founder_tone(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'tone',
        'Consider using the founder tone',
        'The founder tone is designed to emphasize vision and leadership, which aligns with your career stage.',
        _tone_change('founder'),
    )


def _job_seeking_professional(ctx: HeuristicsContext) -> bool:
    return ctx.intent.profile_goal == 'job' and ctx.intent.career_stage == 'professional' and ctx.intent.tone != 'confident'


def _rec_job_confident(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'tone',
        'Consider a confident tone for job searching',
        'When looking for roles, a confident tone helps communicate your value proposition clearly to potential employers.',
        _tone_change('confident'),
    )


TONE_RULES = [
    ('student_friendly', _student_low_activity, _rec_student_friendly),
    ('confident_for_impact', _popular_and_active, _rec_confident_for_impact),
    ('open_source_friendly', _open_source_minimal, _rec_open_source_friendly),
    ('founder_tone', _founder_without_founder_tone, _rec_founder_tone),
    ('job_confident', _job_seeking_professional, _rec_job_confident),
]


# --- warning rules ---

def _warn_no_recent_activity(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'warning',
        'Your profile shows limited recent activity',
        f"Most of your repositories haven't been updated in the last {ctx.recent_months} months. "
        'Consider focusing your bio on skills and experience rather than active projects.',
    )


def _warn_mostly_forks(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'warning',
        'Most of your repositories appear to be forks',
        'Featuring forked repositories may not showcase your original work effectively. '
        'Consider highlighting your own projects instead.',
    )


def _warn_no_stars(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'warning',
        "Your repositories haven't received stars yet",
        'This is normal for newer profiles. Focus on describing the problems your projects solve rather than metrics.',
    )


def _warn_few_repos(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'warning',
        'You have a small number of public repositories',
        'With fewer projects to showcase, consider writing detailed descriptions for each one to maximize their impact.',
    )


def _warn_missing_role(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'warning',
        'Your primary role is not specified',
        'Adding a clear role helps visitors quickly understand what you do.',
    )


def _warn_placeholder_name(ctx: HeuristicsContext) -> HeuristicRecommendation:
    return HeuristicRecommendation(
        'warning',
        'Remember to add your real name',
        'A personalized name makes your profile more authentic and memorable.',
    )


WARNING_RULES = [
    ('limited_recent_activity', lambda ctx: ctx.has_signals and not ctx.signals.has_recent_activity and ctx.signals.repo_count > 0, _warn_no_recent_activity),
    ('mostly_forks', lambda ctx: ctx.has_signals and ctx.signals.fork_ratio > ctx.thresholds['fork_ratio_warning'] and ctx.signals.repo_count > ctx.thresholds['fork_ratio_min_repos'], _warn_mostly_forks),
    ('no_stars', lambda ctx: ctx.has_signals and ctx.signals.total_stars == 0 and ctx.signals.repo_count > 0, _warn_no_stars),
    ('few_repos', lambda ctx: ctx.has_signals and 0 < ctx.signals.repo_count < ctx.thresholds['small_profile_repos'], _warn_few_repos),
    # intent-only rules, evaluated with or without signals
    ('missing_role', lambda ctx: _blank(ctx.intent.role), _warn_missing_role),
    ('placeholder_name', lambda ctx: _blank(ctx.intent.name) or ctx.intent.name.strip() == PLACEHOLDER_NAME, _warn_placeholder_name),
]

RULE_FAMILIES = [
    ('section', SECTION_RULES),
    ('tone', TONE_RULES),
    ('warning', WARNING_RULES),
]


def _evaluate(rules, ctx: HeuristicsContext) -> List[HeuristicRecommendation]:
    fired: List[HeuristicRecommendation] = []
    for name, predicate, build in rules:
        if predicate(ctx):
            logger.debug('heuristic rule fired: %s', name)
            fired.append(build(ctx))
    return fired


def generate_heuristic_recommendations(intent: ProfileIntent, signals: Optional[AggregateSignals] = None, thresholds: Optional[dict] = None) -> List[HeuristicRecommendation]:
    """
    Evaluate every rule family against the intent and optional signals.

    Parameters:
        intent (ProfileIntent): the declared self-description; read only.
        signals (AggregateSignals): derived repository facts, or None when no fact source was consulted.
        thresholds (dict): optional threshold overrides; defaults to scoring.utils.DEFAULT_THRESHOLDS.

    Returns:
        List[HeuristicRecommendation]: section, then tone, then warning recommendations.
    """
    ctx = HeuristicsContext(intent, signals, thresholds or DEFAULT_THRESHOLDS)
    recommendations: List[HeuristicRecommendation] = []
    for _family, rules in RULE_FAMILIES:
        recommendations.extend(_evaluate(rules, ctx))
    return recommendations
