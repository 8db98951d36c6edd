"""
Data models for the profile intent and the advisory records produced by the engine.
"""
from typing import List, Optional, Dict, Any, Iterable

CAREER_STAGES = ('student', 'professional', 'founder', 'open-source')
PROFILE_GOALS = ('job', 'open-source', 'branding')
TONES = ('minimal', 'confident', 'friendly', 'founder')
EMOJI_PREFERENCES = ('none', 'light', 'expressive')
SECTION_NAMES = ('whatIDo', 'techStack', 'projects', 'goal', 'connect')

PLACEHOLDER_NAME = 'Your Name'

# advisory kinds
SUGGESTION_TYPES = ('repo', 'section', 'warning')
RECOMMENDATION_TYPES = ('section', 'tone', 'warning')
ACTION_TYPES = ('enable', 'disable', 'change')


def _check_choice(field: str, value: str, choices) -> str:
    if value not in choices:
        raise ValueError(f"Invalid {field} {value!r}; expected one of: {', '.join(choices)}")
    return value


class FeaturedProject:
    """A featured project entry: name plus a one-line impact statement."""

    def __init__(self, name: str, impact: str):
        self.name = name
        self.impact = impact

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'impact': self.impact}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'FeaturedProject':
        return cls(name=str(raw.get('name') or ''), impact=str(raw.get('impact') or ''))

    def __eq__(self, other):
        return isinstance(other, FeaturedProject) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"FeaturedProject(name={self.name!r}, impact={self.impact!r})"


def merge_projects(existing: Iterable[FeaturedProject], incoming: Iterable[FeaturedProject]) -> List[FeaturedProject]:
    """Set-by-name merge of featured projects; a later entry replaces an earlier one in place."""
    by_name: Dict[str, FeaturedProject] = {}
    for p in list(existing) + list(incoming):
        by_name[p.name] = FeaturedProject(p.name, p.impact)
    return list(by_name.values())


def merge_technologies(existing: Iterable[str], incoming: Iterable[str]) -> List[str]:
    """Set union of technology names preserving first-seen order."""
    merged: Dict[str, None] = {}
    for tech in list(existing) + [str(t) for t in incoming]:
        merged.setdefault(tech, None)
    return list(merged)


class ProfileIntent:
    """
    The person's declared self-description. Treated as a value: the resolver returns new
    instances and never mutates the one it was given. Duplicate technologies are merged and
    featured projects are unique by name (last entry wins).
    """

    def __init__(
        self,
        name: str = PLACEHOLDER_NAME,
        username: str = '',
        career_stage: str = 'professional',
        role: str = '',
        tech_stack: Optional[List[str]] = None,
        featured_projects: Optional[List[FeaturedProject]] = None,
        profile_goal: str = 'job',
        tone: str = 'friendly',
        emoji_preference: str = 'light',
        sections: Optional[Dict[str, bool]] = None,
    ):
        self.name = name
        self.username = username
        self.career_stage = career_stage
        self.role = role
        self.tech_stack = merge_technologies([], tech_stack or [])
        self.featured_projects = merge_projects([], featured_projects or [])
        self.profile_goal = profile_goal
        self.tone = tone
        self.emoji_preference = emoji_preference
        self.sections = {s: True for s in SECTION_NAMES}
        self.sections.update({k: bool(v) for k, v in (sections or {}).items()})

    def copy(self) -> 'ProfileIntent':
        return ProfileIntent(
            name=self.name,
            username=self.username,
            career_stage=self.career_stage,
            role=self.role,
            tech_stack=list(self.tech_stack),
            featured_projects=[FeaturedProject(p.name, p.impact) for p in self.featured_projects],
            profile_goal=self.profile_goal,
            tone=self.tone,
            emoji_preference=self.emoji_preference,
            sections=dict(self.sections),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase keys of the intent file format."""
        return {
            'name': self.name,
            'username': self.username,
            'careerStage': self.career_stage,
            'role': self.role,
            'techStack': list(self.tech_stack),
            'featuredProjects': [p.to_dict() for p in self.featured_projects],
            'profileGoal': self.profile_goal,
            'tone': self.tone,
            'emojiPreference': self.emoji_preference,
            'sections': dict(self.sections),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> 'ProfileIntent':
        """Build an intent from an intent-file mapping. Missing keys take the defaults;
        unknown enum values raise ValueError.
        """
        if not isinstance(raw, dict):
            raise ValueError('Profile intent must be a mapping')
        default = cls()
        sections = raw.get('sections') or {}
        if not isinstance(sections, dict):
            raise ValueError('sections must be a mapping of section name to boolean')
        unknown = [k for k in sections if k not in SECTION_NAMES]
        if unknown:
            raise ValueError(f"Unknown section(s): {', '.join(unknown)}")
        return cls(
            name=str(raw.get('name', default.name) or ''),
            username=str(raw.get('username', default.username) or ''),
            career_stage=_check_choice('careerStage', raw.get('careerStage', default.career_stage), CAREER_STAGES),
            role=str(raw.get('role', default.role) or ''),
            tech_stack=[str(t) for t in raw.get('techStack') or []],
            featured_projects=[FeaturedProject.from_dict(p) for p in raw.get('featuredProjects') or [] if isinstance(p, dict)],
            profile_goal=_check_choice('profileGoal', raw.get('profileGoal', default.profile_goal), PROFILE_GOALS),
            tone=_check_choice('tone', raw.get('tone', default.tone), TONES),
            emoji_preference=_check_choice('emojiPreference', raw.get('emojiPreference', default.emoji_preference), EMOJI_PREFERENCES),
            sections=sections,
        )

    def __eq__(self, other):
        return isinstance(other, ProfileIntent) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"ProfileIntent({self.to_dict()!r})"


class SuggestedAction:
    """A mechanically applicable change: enable/disable/change on a named target field."""

    def __init__(self, type: str, target: str, value: Any = None):
        self.type = type
        self.target = target
        self.value = value

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'target': self.target, 'value': self.value}

    def __eq__(self, other):
        return isinstance(other, SuggestedAction) and self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"SuggestedAction(type={self.type!r}, target={self.target!r}, value={self.value!r})"


class Suggestion:
    """
    Advisory item derived directly from ranked repository facts.
    data is one of {'repos': [...]}, {'languages': [...]}, {'project': {...}} or None.
    """

    def __init__(self, type: str, message: str, data: Optional[Dict[str, Any]] = None):
        self.type = type
        self.message = message
        self.data = data

    @property
    def applicable(self) -> bool:
        return bool(self.data)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {'type': self.type, 'message': self.message}
        if self.data:
            data = dict(self.data)
            if 'repos' in data:
                data['repos'] = [r.to_dict() if hasattr(r, 'to_dict') else dict(r) for r in data['repos']]
            out['data'] = data
        return out

    def __repr__(self):
        return f"Suggestion(type={self.type!r}, message={self.message!r})"


class HeuristicRecommendation:
    """
    Advisory item combining intent and signals. explanation is the audit trail and is never empty.
    Without a suggested_action the recommendation is informational only.
    """

    def __init__(self, recommendation_type: str, message: str, explanation: str, suggested_action: Optional[SuggestedAction] = None):
        if not explanation or not explanation.strip():
            raise ValueError('HeuristicRecommendation requires a non-empty explanation')
        self.recommendation_type = recommendation_type
        self.message = message
        self.explanation = explanation
        self.suggested_action = suggested_action

    @property
    def applicable(self) -> bool:
        return self.suggested_action is not None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            'recommendationType': self.recommendation_type,
            'message': self.message,
            'explanation': self.explanation,
        }
        if self.suggested_action is not None:
            out['suggestedAction'] = self.suggested_action.to_dict()
        return out

    def __repr__(self):
        return f"HeuristicRecommendation(type={self.recommendation_type!r}, message={self.message!r})"
