import pytest

from advice.resolver import apply_advisory
from advice.suggestions import generate_suggestions, DEFAULT_PROJECT_IMPACT
from models import (
    ProfileIntent,
    FeaturedProject,
    merge_projects,
    merge_technologies,
    Suggestion,
    HeuristicRecommendation,
    SuggestedAction,
)
from scoring.ranker import filter_and_rank_repos, extract_languages
from conftest import make_fact, NOW


def _rec(action=None, kind='section'):
    return HeuristicRecommendation(kind, 'message', 'because', action)


@pytest.fixture
def intent():
    return ProfileIntent(
        name='Grace Hopper',
        role='Compiler engineer',
        tech_stack=['Go'],
        featured_projects=[FeaturedProject('cobol', 'Business language')],
        sections={'projects': False},
    )


def test_language_merge_is_a_union(intent):
    item = Suggestion('section', 'Primary languages detected: Go, Rust', {'languages': ['Go', 'Rust']})
    once = apply_advisory(item, intent)
    assert once.tech_stack == ['Go', 'Rust']
    assert apply_advisory(item, once) == once


def test_project_suggestion_replaces_by_name(intent):
    first = Suggestion('repo', 'Add "cobol" to featured projects', {'project': {'name': 'cobol', 'impact': 'Runs payroll'}})
    new = Suggestion('repo', 'Add "a0" to featured projects', {'project': {'name': 'a0', 'impact': 'First compiler'}})
    out = apply_advisory(new, apply_advisory(first, intent))
    assert out.featured_projects == [FeaturedProject('cobol', 'Runs payroll'), FeaturedProject('a0', 'First compiler')]
    assert apply_advisory(new, out) == out


def test_top_repos_suggestion_merges_every_repo(intent):
    repos = filter_and_rank_repos([
        make_fact('flow', stars=3, description='Flowcharts'),
        make_fact('cobol', stars=2),
    ])
    top = generate_suggestions(repos, extract_languages(repos), NOW)[0]
    out = apply_advisory(top, intent)
    assert [p.name for p in out.featured_projects] == ['cobol', 'flow']
    assert out.featured_projects[0].impact == DEFAULT_PROJECT_IMPACT
    assert out.featured_projects[1].impact == 'Flowcharts'
    assert apply_advisory(top, out) == out


def test_enable_and_disable_sections(intent):
    enabled = apply_advisory(_rec(SuggestedAction('enable', 'projects', True)), intent)
    assert enabled.sections['projects'] is True
    assert apply_advisory(_rec(SuggestedAction('enable', 'projects', True)), enabled) == enabled
    disabled = apply_advisory(_rec(SuggestedAction('disable', 'projects', False)), enabled)
    assert disabled.sections['projects'] is False
    # a missing value falls back to the action type
    assert apply_advisory(_rec(SuggestedAction('enable', 'goal')), intent).sections['goal'] is True
    assert apply_advisory(_rec(SuggestedAction('disable', 'goal')), intent).sections['goal'] is False


def test_change_tone_and_goal(intent):
    out = apply_advisory(_rec(SuggestedAction('change', 'tone', 'founder'), kind='tone'), intent)
    assert out.tone == 'founder'
    assert apply_advisory(_rec(SuggestedAction('change', 'tone', 'founder'), kind='tone'), out) == out
    out = apply_advisory(_rec(SuggestedAction('change', 'goal', 'open-source')), intent)
    assert out.profile_goal == 'open-source'


def test_change_tech_stack_merges(intent):
    action = SuggestedAction('change', 'techStack', ['Rust', 'Go', 'Python'])
    out = apply_advisory(_rec(action), intent)
    assert out.tech_stack == ['Go', 'Rust', 'Python']
    assert apply_advisory(_rec(action), out) == out


def test_input_is_never_mutated(intent):
    before = intent.to_dict()
    apply_advisory(Suggestion('section', 'langs', {'languages': ['Rust']}), intent)
    apply_advisory(Suggestion('repo', 'proj', {'project': {'name': 'x', 'impact': 'y'}}), intent)
    apply_advisory(_rec(SuggestedAction('enable', 'projects', True)), intent)
    apply_advisory(_rec(SuggestedAction('change', 'tone', 'minimal')), intent)
    assert intent.to_dict() == before


def test_informational_items_return_equal_copy(intent):
    for item in (_rec(None, kind='warning'), Suggestion('warning', 'No public repositories found for this user.')):
        out = apply_advisory(item, intent)
        assert out == intent
        assert out is not intent


def test_unknown_targets_are_rejected(intent):
    with pytest.raises(ValueError):
        apply_advisory(_rec(SuggestedAction('enable', 'blog', True)), intent)
    with pytest.raises(ValueError):
        apply_advisory(_rec(SuggestedAction('change', 'avatar', 'x.png')), intent)
    with pytest.raises(ValueError):
        apply_advisory(_rec(SuggestedAction('change', 'tone', 'sarcastic')), intent)
    with pytest.raises(ValueError):
        apply_advisory(_rec(SuggestedAction('rename', 'tone', 'minimal')), intent)


def test_unsupported_item_type(intent):
    with pytest.raises(TypeError):
        apply_advisory({'type': 'repo'}, intent)


def test_merge_helpers():
    merged = merge_projects([FeaturedProject('a', '1'), FeaturedProject('b', '2')], [FeaturedProject('a', '3')])
    assert merged == [FeaturedProject('a', '3'), FeaturedProject('b', '2')]
    assert merge_technologies(['Go'], ['Go', 'Rust', 'Rust']) == ['Go', 'Rust']
    assert merge_technologies([], []) == []
