"""Constants for Flexshare"""

import re

# ==================== Template Sniffing ====================
GRAMMAR_TOKEN = "{{"
GRAMMAR_STATEMENT_TOKEN = "{%"
LEGACY_TOKEN = "${data."
LEGACY_VARIABLE_PATTERN = re.compile(r"\$\{data\.([^}]+)\}")

# ==================== Template Files ====================
TEMPLATE_CAROUSEL = "carousel.json.j2"
TEMPLATE_SINGLE_POSTER = "single_poster.json.j2"

# ==================== Built-in Template Ids ====================
BUILTIN_CAROUSEL_ID = "builtin-carousel"
BUILTIN_SINGLE_POSTER_ID = "builtin-single-poster"

# ==================== Classification Markers ====================
# Matched case-insensitively against template name/description
CAROUSEL_NAME_MARKERS = ("carousel", "multi-page", "多頁")
CAROUSEL_DESCRIPTION_MARKERS = ("carousel",)
SINGLE_NAME_MARKERS = ("single", "poster", "單頁", "海報")
SINGLE_DESCRIPTION_MARKERS = ("single",)

# ==================== Patch Overlay ====================
INLINE_PATCH_KEY = "__patch"
MESSAGE_PATCH_PATH = "advanced.messagePatch"
MAX_PATCH_DEPTH_DEFAULT = 32

# ==================== Renderer ====================
TEMPLATE_CACHE_SIZE_DEFAULT = 64

# ==================== Message Rules ====================
ALT_TEXT_MAX_LENGTH = 400
COLOR_PATTERN = re.compile(r"^#([0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
SECURE_SCHEME = "https"

# ==================== Error Paths ====================
PATH_TEMPLATE_TEXT = "templateText"
PATH_ROOT = "root"
PATH_ALT_TEXT = "altText"
PATH_CONTENTS = "contents"

# ==================== Files ====================
LOG_FILE_DEFAULT = "data/flexshare.log"
CONFIG_FILE_DEFAULT = "config.toml"
