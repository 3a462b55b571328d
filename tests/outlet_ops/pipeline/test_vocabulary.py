"""Tests for outlet_ops.pipeline.vocabulary — stages, brands, cities, statuses."""
import pytest

from outlet_ops.pipeline.vocabulary import (
    Stage, STAGE_ORDER, FIRST_STAGE, LAST_STAGE, BRANDS, CITIES, STATUSES,
    DEFAULT_STATUS, PRIORITIES, DEFAULT_PRIORITY, match_stage, match_brand, match_city,
    match_status, match_priority,
    stage_label, stage_from_label, vocabulary_info,
)


class TestStageOrder:

    def test_nine_stages(self):
        assert len(STAGE_ORDER) == 9

    def test_first_and_last(self):
        assert FIRST_STAGE is Stage.ONBOARDING_REQUEST
        assert LAST_STAGE is Stage.OUTLET_LIVE

    def test_order_matches_pipeline(self):
        assert STAGE_ORDER[2] is Stage.CHEF_APPROVAL
        assert STAGE_ORDER[6] is Stage.TRAINING

    def test_target_days(self):
        assert Stage.FASSI_APPLY.target_days == 7
        assert Stage.OUTLET_LIVE.target_days == 0


class TestStageLabels:

    def test_label_differs_from_key(self):
        assert Stage.TRAINING.value == 'TRAINING OF OUTLET'
        assert stage_label(Stage.TRAINING) == 'Training'

    def test_label_round_trip(self):
        for stage in STAGE_ORDER:
            assert stage_from_label(stage_label(stage)) is stage

    def test_label_lookup_case_insensitive(self):
        assert stage_from_label('  fassi apply ') is Stage.FASSI_APPLY

    def test_unknown_label(self):
        assert stage_from_label('Nope') is None
        assert stage_from_label(None) is None


class TestMatchStage:

    @pytest.mark.parametrize('text', [
        'CHEF APPROVAL', 'chef approval', '  Chef Approval  ', 'CHEFAPPROVAL', 'chef   approval',
    ])
    def test_tolerates_case_and_whitespace(self, text):
        assert match_stage(text) is Stage.CHEF_APPROVAL

    def test_compacted_multiword(self):
        assert match_stage('ONBOARDINGREQUEST') is Stage.ONBOARDING_REQUEST
        assert match_stage('training of outlet') is Stage.TRAINING

    def test_display_label_is_not_a_key(self):
        # 'Training' is the label; the import key is 'TRAINING OF OUTLET'
        assert match_stage('Training') is None

    def test_unknown(self):
        assert match_stage('NOT_A_REAL_STAGE') is None

    def test_blank(self):
        assert match_stage('') is None
        assert match_stage('   ') is None
        assert match_stage(None) is None


class TestMatchMembers:

    def test_brand_case_insensitive(self):
        assert match_brand('dil daily') == 'Dil Daily'
        assert match_brand('  THE CHAAT CULT ') == 'The Chaat Cult'

    def test_brand_does_not_strip_internal_whitespace(self):
        assert match_brand('DilDaily') is None

    def test_unknown_brand(self):
        assert match_brand('McBurger') is None

    def test_city(self):
        assert match_city('PUNE') == 'Pune'
        assert match_city('Delhi') is None

    def test_status(self):
        assert match_status('ONBOARDING IN PROGRESS') == 'onboarding in progress'
        assert match_status('training PENDING') == 'Training pending'
        assert match_status('Paused') is None

    def test_blank_is_none(self):
        assert match_brand('') is None
        assert match_city(None) is None

    def test_default_status_is_a_member(self):
        assert DEFAULT_STATUS in STATUSES

    def test_priority(self):
        assert match_priority('HIGH') == 'high'
        assert match_priority(' low ') == 'low'
        assert match_priority('urgent') is None
        assert DEFAULT_PRIORITY in PRIORITIES


class TestVocabularyInfo:

    def test_shape(self):
        info = vocabulary_info()
        assert [s['key'] for s in info['stages']] == [s.value for s in STAGE_ORDER]
        assert info['stages'][0] == {
            'id': 'ONBOARDING_REQUEST',
            'key': 'ONBOARDING REQUEST',
            'label': 'Onboarding Request',
            'target_days': 2,
        }
        assert info['brands'] == BRANDS
        assert info['cities'] == CITIES
        assert info['statuses'] == STATUSES
        assert info['priorities'] == ['low', 'medium', 'high']
