"""Enumeration type definitions"""

from enum import Enum


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    IMAGE_URL = "imageUrl"
    URL = "url"
    SELECT = "select"
    NUMBER = "number"
    COLOR = "color"
    JSON = "json"
    REPEATABLE = "repeatable"


class RenderMode(str, Enum):
    """How a template's text is turned into message JSON"""

    GRAMMAR = "grammar"
    LEGACY = "legacy"
    RAW_JSON = "raw_json"


class TemplateKind(str, Enum):
    CAROUSEL = "carousel"
    SINGLE = "single"
    CUSTOM = "custom"


class TemplateStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class DocMode(str, Enum):
    SINGLE = "single"
    CAROUSEL = "carousel"


class ActionType(str, Enum):
    URI = "uri"
    MESSAGE = "message"
    POSTBACK = "postback"
