"""Built-in upgraded templates: a multi-page carousel and a single poster.

Both render through grammar mode and support page loops, per-button
``buttonPatch`` overlays and a whole-message ``advanced.messagePatch``.
Styling fields that the template text guards with ``default(...)`` carry
defaults but are optional.
"""

from __future__ import annotations

import copy
from functools import lru_cache
from pathlib import Path
from typing import Any

from .consts import (
    BUILTIN_CAROUSEL_ID,
    BUILTIN_SINGLE_POSTER_ID,
    TEMPLATE_CAROUSEL,
    TEMPLATE_SINGLE_POSTER,
)
from .enums import RenderMode, TemplateStatus
from .models import Template
from .schema import FormSchema

TEMPLATE_DIR = Path(__file__).parent / "templates"

TEXT_SIZES = ["xxs", "xs", "sm", "md", "lg", "xl", "xxl", "3xl", "4xl", "5xl"]
TEXT_WEIGHTS = ["regular", "bold"]
ASPECT_RATIOS = ["1:1", "4:3", "16:9", "20:13", "2:3"]
ASPECT_MODES = ["cover", "fit"]
BUTTON_STYLES = ["primary", "secondary", "link"]
BUTTON_HEIGHTS = ["sm", "md", "lg"]

ACTION_OPTIONS = [
    {"label": "Open link (uri)", "value": "uri"},
    {"label": "Send text (message)", "value": "message"},
    {"label": "Send data (postback)", "value": "postback"},
]


def _button_fields() -> list[dict[str, Any]]:
    return [
        {"key": "label", "label": "Button text", "type": "text", "required": True,
         "constraints": {"maxLength": 20}},
        {"key": "actionType", "label": "Button action", "type": "select", "required": True,
         "default": "uri", "options": ACTION_OPTIONS},
        {"key": "url", "label": "Link (uri)", "type": "url",
         "constraints": {"httpsOnly": True, "requiredIf": {"when": "actionType", "is": "uri"}}},
        {"key": "text", "label": "Text to send (message)", "type": "text",
         "constraints": {"maxLength": 300,
                         "requiredIf": {"when": "actionType", "is": "message"}}},
        {"key": "data", "label": "Postback data (postback)", "type": "text",
         "constraints": {"maxLength": 300,
                         "requiredIf": {"when": "actionType", "is": "postback"}}},
        {"key": "style", "label": "Style", "type": "select",
         "default": "primary", "options": BUTTON_STYLES},
        {"key": "color", "label": "Button color (primary/secondary)", "type": "color"},
        {"key": "height", "label": "Height", "type": "select",
         "default": "sm", "options": BUTTON_HEIGHTS},
        {"key": "buttonPatch", "label": "Advanced: button JSON patch", "type": "json",
         "help": "Extra Flex button properties such as margin, gravity, flex or action.altUri."},
    ]


def _share_ui_section(primary_text: str) -> dict[str, Any]:
    return {
        "id": "shareUi",
        "title": "Share page",
        "fields": [
            {"key": "shareUi.iconUrl", "label": "Share page icon", "type": "imageUrl",
             "constraints": {"httpsOnly": True}},
            {"key": "shareUi.primaryButtonText", "label": "Share button text", "type": "text",
             "default": primary_text, "constraints": {"maxLength": 12}},
            {"key": "shareUi.moreText", "label": "Expand preview text", "type": "text",
             "default": "View content", "constraints": {"maxLength": 12}},
        ],
    }


ADVANCED_SECTION = {
    "id": "advanced",
    "title": "Advanced",
    "fields": [
        {"key": "advanced.messagePatch", "label": "Whole message JSON patch", "type": "json",
         "help": "Deep-merged into the rendered Flex message last."},
    ],
}


CAROUSEL_SCHEMA = {
    "schemaVersion": 2,
    "title": "Multi-page carousel",
    "sections": [
        {
            "id": "meta",
            "title": "Basics",
            "fields": [
                {"key": "altText", "label": "altText (notification summary)", "type": "text",
                 "required": True, "default": "View message", "constraints": {"maxLength": 60}},
                {"key": "title", "label": "Share page title", "type": "text",
                 "required": True, "default": "Shared message", "constraints": {"maxLength": 40}},
                {"key": "subtitle", "label": "Share page subtitle", "type": "text",
                 "constraints": {"maxLength": 60}},
            ],
        },
        {
            "id": "hero",
            "title": "Image defaults (overridable per page)",
            "fields": [
                {"key": "hero.aspectRatio", "label": "Aspect ratio", "type": "select",
                 "default": "1:1", "options": ASPECT_RATIOS},
                {"key": "hero.aspectMode", "label": "Aspect mode", "type": "select",
                 "default": "cover", "options": ASPECT_MODES},
            ],
        },
        {
            "id": "style",
            "title": "Style defaults (overridable per page)",
            "fields": [
                {"key": "style.headline.size", "label": "Headline size", "type": "select",
                 "default": "lg", "options": TEXT_SIZES},
                {"key": "style.headline.weight", "label": "Headline weight", "type": "select",
                 "default": "bold", "options": TEXT_WEIGHTS},
                {"key": "style.headline.color", "label": "Headline color", "type": "color",
                 "default": "#111111"},
                {"key": "style.desc.size", "label": "Body text size", "type": "select",
                 "default": "sm", "options": TEXT_SIZES},
                {"key": "style.desc.color", "label": "Body text color", "type": "color",
                 "default": "#666666"},
                {"key": "style.bubble.bodyBgColor", "label": "Card background", "type": "color",
                 "default": "#ffffff"},
                {"key": "style.button.style", "label": "Default button style", "type": "select",
                 "default": "primary", "options": BUTTON_STYLES},
                {"key": "style.button.color", "label": "Button color (primary/secondary)",
                 "type": "color", "default": "#06C755",
                 "help": "Link buttons usually need no color."},
                {"key": "style.button.height", "label": "Button height", "type": "select",
                 "default": "sm", "options": BUTTON_HEIGHTS},
            ],
        },
        {
            "id": "pages",
            "title": "Pages",
            "repeatable": True,
            "key": "pages",
            "constraints": {"minItems": 1, "maxItems": 10},
            "itemSchema": {
                "title": "Page {{index}}",
                "fields": [
                    {"key": "headline", "label": "Headline", "type": "text", "required": True,
                     "constraints": {"maxLength": 40}},
                    {"key": "headlineSize", "label": "Headline size (override)",
                     "type": "select", "options": TEXT_SIZES},
                    {"key": "headlineWeight", "label": "Headline weight (override)",
                     "type": "select", "options": TEXT_WEIGHTS},
                    {"key": "headlineColor", "label": "Headline color (override)",
                     "type": "color"},
                    {"key": "desc", "label": "Body text", "type": "textarea",
                     "constraints": {"maxLength": 300}},
                    {"key": "descSize", "label": "Body text size (override)", "type": "select",
                     "options": TEXT_SIZES},
                    {"key": "descColor", "label": "Body text color (override)", "type": "color"},
                    {"key": "imageUrl", "label": "Image URL", "type": "imageUrl",
                     "required": True, "constraints": {"httpsOnly": True}},
                    {"key": "imageAspectRatio", "label": "Aspect ratio (override)",
                     "type": "select", "options": ASPECT_RATIOS},
                    {"key": "imageAspectMode", "label": "Aspect mode (override)",
                     "type": "select", "options": ASPECT_MODES},
                    {"key": "bodyBgColor", "label": "Card background (override)",
                     "type": "color"},
                    {
                        "key": "cta",
                        "label": "Buttons (CTA)",
                        "type": "repeatable",
                        "constraints": {"minItems": 0, "maxItems": 4},
                        "itemSchema": {"fields": _button_fields()},
                    },
                ],
            },
        },
        _share_ui_section("Pick friends"),
        ADVANCED_SECTION,
    ],
}


SINGLE_POSTER_SCHEMA = {
    "schemaVersion": 2,
    "title": "Single event poster",
    "sections": [
        {
            "id": "meta",
            "title": "Basics",
            "fields": [
                {"key": "altText", "label": "altText (notification summary)", "type": "text",
                 "required": True, "default": "View event poster",
                 "constraints": {"maxLength": 60}},
            ],
        },
        {
            "id": "hero",
            "title": "Hero image",
            "fields": [
                {"key": "heroImageUrl", "label": "Hero image URL", "type": "imageUrl",
                 "required": True, "constraints": {"httpsOnly": True}},
                {"key": "heroAspectRatio", "label": "Aspect ratio", "type": "select",
                 "default": "20:13", "options": ASPECT_RATIOS},
                {"key": "heroAspectMode", "label": "Aspect mode", "type": "select",
                 "default": "cover", "options": ASPECT_MODES},
            ],
        },
        {
            "id": "content",
            "title": "Content",
            "fields": [
                {"key": "title", "label": "Title", "type": "text", "required": True,
                 "constraints": {"maxLength": 40}},
                {"key": "titleSize", "label": "Title size", "type": "select",
                 "default": "xl", "options": TEXT_SIZES},
                {"key": "titleColor", "label": "Title color", "type": "color",
                 "default": "#111111"},
                {"key": "description", "label": "Description", "type": "textarea",
                 "constraints": {"maxLength": 400}},
                {"key": "descriptionSize", "label": "Description size", "type": "select",
                 "default": "sm", "options": TEXT_SIZES},
                {"key": "descriptionColor", "label": "Description color", "type": "color",
                 "default": "#666666"},
                {"key": "date", "label": "Date and time", "type": "text",
                 "constraints": {"maxLength": 40}},
                {"key": "location", "label": "Location", "type": "text",
                 "constraints": {"maxLength": 60}},
                {"key": "bodyBgColor", "label": "Card background", "type": "color",
                 "default": "#ffffff"},
            ],
        },
        {
            "id": "buttons",
            "title": "Buttons (CTA)",
            "repeatable": True,
            "key": "buttons",
            "constraints": {"minItems": 0, "maxItems": 4},
            "itemSchema": {
                "title": "Button {{index}}",
                "fields": _button_fields(),
            },
        },
        _share_ui_section("Share now"),
        ADVANCED_SECTION,
    ],
}


CAROUSEL_SAMPLE_DATA = {
    "altText": "2026 calendar",
    "title": "2026 Calendar",
    "subtitle": "Tap to share with friends or groups",
    "hero": {"aspectRatio": "1:1", "aspectMode": "cover"},
    "style": {
        "headline": {"size": "xl", "weight": "bold", "color": "#111111"},
        "desc": {"size": "sm", "color": "#666666"},
        "bubble": {"bodyBgColor": "#ffffff"},
        "button": {"style": "primary", "color": "#06C755", "height": "sm"},
    },
    "pages": [
        {
            "headline": "January picks",
            "desc": "A fresh start for the new year.",
            "imageUrl": "https://images.unsplash.com/photo-1467810563316-b5476525c0f9?w=1040",
            "cta": [
                {"label": "Learn more", "actionType": "uri",
                 "url": "https://example.com/jan", "style": "primary",
                 "color": "#06C755", "height": "sm"},
            ],
        },
        {
            "headline": "February specials",
            "headlineColor": "#C2185B",
            "desc": "Valentine's week events are live.",
            "imageUrl": "https://images.unsplash.com/photo-1518199266791-5375a83190b7?w=1040",
            "cta": [
                {"label": "See events", "actionType": "uri",
                 "url": "https://example.com/feb", "style": "secondary",
                 "color": "#111111", "height": "sm"},
            ],
        },
    ],
    "shareUi": {"primaryButtonText": "Pick friends", "moreText": "View content"},
}


SINGLE_POSTER_SAMPLE_DATA = {
    "altText": "Annual gala invitation",
    "heroImageUrl": "https://images.unsplash.com/photo-1492684223066-81342ee5ff30?w=1040",
    "heroAspectRatio": "20:13",
    "heroAspectMode": "cover",
    "title": "2026 Annual Gala",
    "titleSize": "xl",
    "titleColor": "#111111",
    "description": "You are warmly invited to our annual gala.",
    "descriptionSize": "sm",
    "descriptionColor": "#666666",
    "date": "2026/03/15 14:00-18:00",
    "location": "Taipei International Convention Center",
    "bodyBgColor": "#ffffff",
    "buttons": [
        {"label": "Register", "actionType": "uri", "url": "https://example.com/register",
         "style": "primary", "color": "#06C755", "height": "sm"},
        {"label": "Details", "actionType": "uri", "url": "https://example.com/details",
         "style": "secondary", "color": "#111111", "height": "sm"},
    ],
    "shareUi": {"primaryButtonText": "Share now", "moreText": "View content"},
}


@lru_cache(maxsize=None)
def _read_template_text(filename: str) -> str:
    return (TEMPLATE_DIR / filename).read_text(encoding="utf-8")


def carousel_template_text() -> str:
    return _read_template_text(TEMPLATE_CAROUSEL)


def single_poster_template_text() -> str:
    return _read_template_text(TEMPLATE_SINGLE_POSTER)


def carousel_schema() -> FormSchema:
    return FormSchema.model_validate(CAROUSEL_SCHEMA)


def single_poster_schema() -> FormSchema:
    return FormSchema.model_validate(SINGLE_POSTER_SCHEMA)


def default_templates() -> list[Template]:
    """Return the built-in templates as published records with sample data."""
    return [
        Template(
            id=BUILTIN_CAROUSEL_ID,
            name="Multi-page carousel",
            description=(
                "Carousel for product showcases and multi-page messages. Each page "
                "can override sizes, colors and buttons; supports JSON patches."
            ),
            status=TemplateStatus.PUBLISHED,
            version=2,
            template_text=carousel_template_text(),
            form_schema=carousel_schema(),
            sample_data=copy.deepcopy(CAROUSEL_SAMPLE_DATA),
            render_mode=RenderMode.GRAMMAR,
        ),
        Template(
            id=BUILTIN_SINGLE_POSTER_ID,
            name="Single event poster",
            description=(
                "Single-page poster for event promotion. Supports sizes, colors, "
                "button styles and JSON patches."
            ),
            status=TemplateStatus.PUBLISHED,
            version=2,
            template_text=single_poster_template_text(),
            form_schema=single_poster_schema(),
            sample_data=copy.deepcopy(SINGLE_POSTER_SAMPLE_DATA),
            render_mode=RenderMode.GRAMMAR,
        ),
    ]
