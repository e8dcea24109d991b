import copy

import pytest

from flexshare import builtin
from flexshare.consts import BUILTIN_CAROUSEL_ID, BUILTIN_SINGLE_POSTER_ID
from flexshare.i18n import initialize


@pytest.fixture(autouse=True)
def english_messages():
    initialize(ui_language="en")


@pytest.fixture
def builtin_templates():
    return {t.id: t for t in builtin.default_templates()}


@pytest.fixture
def single_poster(builtin_templates):
    return builtin_templates[BUILTIN_SINGLE_POSTER_ID]


@pytest.fixture
def carousel(builtin_templates):
    return builtin_templates[BUILTIN_CAROUSEL_ID]


@pytest.fixture
def poster_data():
    return {
        "altText": "x",
        "heroImageUrl": "https://i/1.png",
        "title": "T",
        "buttons": [{"label": "Go", "actionType": "uri", "url": "https://e.com"}],
    }


@pytest.fixture
def carousel_data():
    return copy.deepcopy(builtin.CAROUSEL_SAMPLE_DATA)


@pytest.fixture
def legacy_poster_record():
    """A template stored before grammar rendering, as the database holds it."""
    return {
        "id": "legacy-poster",
        "name": "單頁活動海報",
        "description": None,
        "status": "published",
        "version": 1,
        "templateText": (
            '{"type": "flex", "altText": "${data.altText}", '
            '"contents": {"type": "bubble", "body": {"type": "box", '
            '"layout": "vertical", "contents": [{"type": "text", "text": "${data.title}"}]}}}'
        ),
        "schema": {
            "sections": [
                {
                    "id": "meta",
                    "fields": [
                        {"key": "altText", "type": "text", "required": True},
                        {"key": "title", "type": "text", "required": True},
                    ],
                }
            ]
        },
    }
