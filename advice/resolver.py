"""
Apply/merge resolver: compute the next ProfileIntent from one advisory item.

Only the human-facing caller invokes this, after the person approved the item; the engine never
does. The input intent is never mutated. Merges go through keyed containers so applying the same
item twice yields the same intent as applying it once:

- featured projects are keyed by name (replace in place, else append; last write wins)
- technologies are keyed by themselves (union, existing order first, new entries in first-seen order)
- 'change' overwrites scalar fields, 'enable'/'disable' set a section flag
"""
from typing import Any, Dict, Union
from models import (
    ProfileIntent,
    FeaturedProject,
    merge_projects,
    merge_technologies,
    Suggestion,
    HeuristicRecommendation,
    SuggestedAction,
    SECTION_NAMES,
    TONES,
    PROFILE_GOALS,
    CAREER_STAGES,
    EMOJI_PREFERENCES,
)
from advice.suggestions import DEFAULT_PROJECT_IMPACT
from log_config import get_logger

logger = get_logger(__name__)

Advisory = Union[Suggestion, HeuristicRecommendation]

# 'change' targets that overwrite a scalar field: target -> (attribute, allowed values)
_SCALAR_TARGETS = {
    'tone': ('tone', TONES),
    'goal': ('profile_goal', PROFILE_GOALS),
    'profileGoal': ('profile_goal', PROFILE_GOALS),
    'careerStage': ('career_stage', CAREER_STAGES),
    'emojiPreference': ('emoji_preference', EMOJI_PREFERENCES),
}


def _project_from_payload(raw: Any) -> FeaturedProject:
    if isinstance(raw, FeaturedProject):
        return FeaturedProject(raw.name, raw.impact)
    if isinstance(raw, dict):
        return FeaturedProject(str(raw.get('name') or ''), str(raw.get('impact') or DEFAULT_PROJECT_IMPACT))
    # NormalizedRepository or anything repo-shaped
    return FeaturedProject(getattr(raw, 'name', ''), getattr(raw, 'description', '') or DEFAULT_PROJECT_IMPACT)


def _apply_suggestion_data(data: Dict[str, Any], intent: ProfileIntent) -> ProfileIntent:
    nxt = intent.copy()
    if 'project' in data:
        nxt.featured_projects = merge_projects(nxt.featured_projects, [_project_from_payload(data['project'])])
    if 'repos' in data:
        nxt.featured_projects = merge_projects(nxt.featured_projects, [_project_from_payload(r) for r in data['repos']])
    if 'languages' in data:
        nxt.tech_stack = merge_technologies(nxt.tech_stack, data['languages'])
    return nxt


def _apply_action(action: SuggestedAction, intent: ProfileIntent) -> ProfileIntent:
    nxt = intent.copy()
    if action.type in ('enable', 'disable'):
        if action.target not in SECTION_NAMES:
            raise ValueError(f"Cannot {action.type} unknown section {action.target!r}")
        nxt.sections[action.target] = bool(action.value) if action.value is not None else action.type == 'enable'
        return nxt

    if action.type != 'change':
        raise ValueError(f"Unknown action type {action.type!r}")

    if action.target == 'techStack':
        values = action.value if isinstance(action.value, (list, tuple)) else [action.value]
        nxt.tech_stack = merge_technologies(nxt.tech_stack, [v for v in values if v])
        return nxt

    if action.target in _SCALAR_TARGETS:
        attr, allowed = _SCALAR_TARGETS[action.target]
        if action.value not in allowed:
            raise ValueError(f"Invalid value {action.value!r} for {action.target}")
        setattr(nxt, attr, action.value)
        return nxt

    raise ValueError(f"Cannot change unknown target {action.target!r}")


def apply_advisory(item: Advisory, intent: ProfileIntent) -> ProfileIntent:
    """
    Return the ProfileIntent that results from accepting one advisory item.

    Informational items (no payload, no suggested action) return an equal copy of the intent.
    Raises ValueError for actions that name an unknown target or carry an invalid value.
    """
    if isinstance(item, HeuristicRecommendation):
        if item.suggested_action is None:
            return intent.copy()
        logger.debug('applying %s on %s', item.suggested_action.type, item.suggested_action.target)
        return _apply_action(item.suggested_action, intent)
    if isinstance(item, Suggestion):
        if not item.data:
            return intent.copy()
        logger.debug('applying suggestion payload: %s', ', '.join(sorted(item.data)))
        return _apply_suggestion_data(item.data, intent)
    raise TypeError(f"Unsupported advisory item: {type(item).__name__}")
