import pytest

from models import ProfileIntent, FeaturedProject, HeuristicRecommendation, Suggestion, SECTION_NAMES


def test_intent_defaults():
    intent = ProfileIntent()
    assert intent.name == 'Your Name'
    assert intent.career_stage == 'professional'
    assert intent.profile_goal == 'job'
    assert intent.tone == 'friendly'
    assert intent.emoji_preference == 'light'
    assert intent.sections == {s: True for s in SECTION_NAMES}


def test_intent_from_dict_round_trip():
    raw = {
        'name': 'Margaret',
        'username': 'mh',
        'careerStage': 'founder',
        'role': 'Flight software',
        'techStack': ['Assembly'],
        'featuredProjects': [{'name': 'apollo', 'impact': 'Landed on the moon'}],
        'profileGoal': 'branding',
        'tone': 'founder',
        'emojiPreference': 'none',
        'sections': {'goal': False},
    }
    intent = ProfileIntent.from_dict(raw)
    assert intent.featured_projects == [FeaturedProject('apollo', 'Landed on the moon')]
    assert intent.sections['goal'] is False
    assert intent.sections['projects'] is True
    out = intent.to_dict()
    for key in raw:
        if key != 'sections':
            assert out[key] == raw[key]
    assert ProfileIntent.from_dict(out) == intent


def test_intent_from_dict_partial_uses_defaults():
    intent = ProfileIntent.from_dict({'name': 'Ken'})
    assert intent.tone == 'friendly'
    assert intent.tech_stack == []


@pytest.mark.parametrize('raw', [
    {'tone': 'sarcastic'},
    {'careerStage': 'retired'},
    {'profileGoal': 'fame'},
    {'emojiPreference': 'all'},
    {'sections': {'blog': True}},
    {'sections': ['projects']},
    ['not', 'a', 'mapping'],
])
def test_intent_from_dict_rejects_invalid(raw):
    with pytest.raises(ValueError):
        ProfileIntent.from_dict(raw)


def test_copy_is_independent():
    intent = ProfileIntent(tech_stack=['Go'], featured_projects=[FeaturedProject('a', 'b')])
    other = intent.copy()
    other.tech_stack.append('Rust')
    other.featured_projects[0].impact = 'changed'
    other.sections['projects'] = False
    assert intent.tech_stack == ['Go']
    assert intent.featured_projects[0].impact == 'b'
    assert intent.sections['projects'] is True


def test_recommendation_requires_explanation():
    with pytest.raises(ValueError):
        HeuristicRecommendation('warning', 'msg', '  ')
    rec = HeuristicRecommendation('warning', 'msg', 'why')
    assert not rec.applicable
    assert rec.to_dict() == {'recommendationType': 'warning', 'message': 'msg', 'explanation': 'why'}


def test_suggestion_applicability():
    assert not Suggestion('warning', 'x').applicable
    assert Suggestion('section', 'y', {'languages': ['Go']}).applicable
    assert 'data' not in Suggestion('warning', 'x').to_dict()


def test_intent_merges_duplicate_entries_on_load():
    intent = ProfileIntent.from_dict({
        'techStack': ['Go', 'Go', 'Rust'],
        'featuredProjects': [{'name': 'x', 'impact': '1'}, {'name': 'y', 'impact': '2'}, {'name': 'x', 'impact': '3'}],
    })
    assert intent.tech_stack == ['Go', 'Rust']
    assert intent.featured_projects == [FeaturedProject('x', '3'), FeaturedProject('y', '2')]
    assert ProfileIntent.from_dict(intent.to_dict()) == intent


def test_intent_constructor_merges_duplicates():
    intent = ProfileIntent(tech_stack=['C', 'C'], featured_projects=[FeaturedProject('a', 'old'), FeaturedProject('a', 'new')])
    assert intent.tech_stack == ['C']
    assert intent.featured_projects == [FeaturedProject('a', 'new')]


def test_intent_defaults_leave_declared_fields_empty():
    intent = ProfileIntent()
    assert intent.username == ''
    assert intent.role == ''
    assert intent.tech_stack == []
    assert intent.featured_projects == []
