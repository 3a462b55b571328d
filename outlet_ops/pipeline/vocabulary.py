"""
Controlled vocabularies — pipeline stages, brands, cities, operational statuses,
priorities.

Stages are a closed Enum whose value is the import-template key
(e.g. 'CHEF APPROVAL'). Display labels and target durations live in plain
lookup tables so matching never depends on presentation strings.
"""
import re
from enum import Enum
from typing import List, Optional


class Stage(str, Enum):
    ONBOARDING_REQUEST = 'ONBOARDING REQUEST'
    OVERLAP_CHECK = 'OVERLAP CHECK'
    CHEF_APPROVAL = 'CHEF APPROVAL'
    FASSI_APPLY = 'FASSI APPLY'
    ID_CREATION = 'ID CREATION'
    INTEGRATION = 'INTEGRATION'
    TRAINING = 'TRAINING OF OUTLET'
    HANDOVER = 'HANDOVER'
    OUTLET_LIVE = 'OUTLET LIVE'

    @property
    def target_days(self) -> int:
        return STAGE_TARGET_DAYS[self]


# Definition order of the Enum is the pipeline order
STAGE_ORDER: List[Stage] = list(Stage)
FIRST_STAGE = STAGE_ORDER[0]
LAST_STAGE = STAGE_ORDER[-1]

STAGE_LABELS = {
    Stage.ONBOARDING_REQUEST: 'Onboarding Request',
    Stage.OVERLAP_CHECK:      'Overlap Check',
    Stage.CHEF_APPROVAL:      'Chef Approval',
    Stage.FASSI_APPLY:        'FASSI Apply',
    Stage.ID_CREATION:        'ID Creation',
    Stage.INTEGRATION:        'Integration',
    Stage.TRAINING:           'Training',
    Stage.HANDOVER:           'Handover',
    Stage.OUTLET_LIVE:        'Outlet Live',
}

# Days an outlet is expected to spend in each stage
STAGE_TARGET_DAYS = {
    Stage.ONBOARDING_REQUEST: 2,
    Stage.OVERLAP_CHECK:      1,
    Stage.CHEF_APPROVAL:      3,
    Stage.FASSI_APPLY:        7,
    Stage.ID_CREATION:        2,
    Stage.INTEGRATION:        2,
    Stage.TRAINING:           3,
    Stage.HANDOVER:           1,
    Stage.OUTLET_LIVE:        0,
}

BRANDS = [
    'Dil Daily',
    'Bihari Bowl',
    'Aahar',
    'Bhole Ke Chole',
    'Khichdi Bar',
    'The Chaat Cult',
    'Vegerama Pure Veg and Fasting Specials',
    'House of Andhra',
    'The Junglee Kitchen',
]

CITIES = [
    'Bangalore',
    'Hyderabad',
    'Chennai',
    'Pune',
    'Mumbai',
    'Ahmedabad',
]

STATUSES = [
    'Active',
    'Inactive',
    'Closed',
    'Deboarded',
    'Training pending',
    'Confirmation Pending',
    'onboarding in progress',
]

DEFAULT_STATUS = 'onboarding in progress'

PRIORITIES = ['low', 'medium', 'high']
DEFAULT_PRIORITY = 'medium'

_WHITESPACE = re.compile(r'\s+')


def stage_label(stage: Stage) -> str:
    """Human-readable label for a stage."""
    return STAGE_LABELS[stage]


def stage_from_label(label: str) -> Optional[Stage]:
    """Inverse of stage_label(); case-insensitive, None when unknown."""
    wanted = (label or '').strip().lower()
    for stage, text in STAGE_LABELS.items():
        if text.lower() == wanted:
            return stage
    return None


def _compact(text: str) -> str:
    return _WHITESPACE.sub('', text).upper()


def match_stage(text) -> Optional[Stage]:
    """
    Resolve free text to a Stage.

    Accepts the import key in any case and tolerates missing or extra
    whitespace ('onboardingrequest', ' Chef  Approval '). Returns None for
    blank or unknown input.
    """
    if text is None:
        return None
    wanted = _compact(str(text))
    if not wanted:
        return None
    for stage in STAGE_ORDER:
        if _compact(stage.value) == wanted:
            return stage
    return None


def _match_member(text, members: List[str]) -> Optional[str]:
    if text is None:
        return None
    wanted = str(text).strip().lower()
    if not wanted:
        return None
    for member in members:
        if member.lower() == wanted:
            return member
    return None


def match_brand(text) -> Optional[str]:
    return _match_member(text, BRANDS)


def match_city(text) -> Optional[str]:
    return _match_member(text, CITIES)


def match_status(text) -> Optional[str]:
    return _match_member(text, STATUSES)


def match_priority(text) -> Optional[str]:
    return _match_member(text, PRIORITIES)


def vocabulary_info() -> dict:
    """JSON-friendly dump of every vocabulary, used by the UI layer."""
    return {
        'stages': [
            {
                'id': stage.name,
                'key': stage.value,
                'label': stage_label(stage),
                'target_days': STAGE_TARGET_DAYS[stage],
            }
            for stage in STAGE_ORDER
        ],
        'brands': list(BRANDS),
        'cities': list(CITIES),
        'statuses': list(STATUSES),
        'priorities': list(PRIORITIES),
    }
