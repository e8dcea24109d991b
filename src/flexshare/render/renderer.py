"""Render template text into a Flex message.

Three render modes exist: grammar mode (Jinja2 with JSON helpers), legacy
``${data.<path>}`` substitution, and raw JSON. After the text is produced
it is parsed as JSON, inline ``__patch`` markers are expanded, and the
whole-message patch from ``advanced.messagePatch`` is merged last.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Callable, Mapping

from jinja2 import ChainableUndefined, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from ..consts import (
    MAX_PATCH_DEPTH_DEFAULT,
    MESSAGE_PATCH_PATH,
    PATH_ROOT,
    PATH_TEMPLATE_TEXT,
    TEMPLATE_CACHE_SIZE_DEFAULT,
)
from ..enums import RenderMode
from ..i18n import gettext as _
from ..models import RenderResult, ValidationError, detect_render_mode
from ..nested_path import get_value
from .helpers import DEFAULT_HELPERS
from .legacy import interpolate
from .patch import apply_inline_patches, apply_message_patch

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a valid JSON value")


class FormDataEnvironment(SandboxedEnvironment):
    """Sandbox where dotted access on form data reads keys, never methods.

    ``page.items`` must return the operator's ``items`` value instead of
    ``dict.items``.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except (KeyError, TypeError):
                return self.undefined(obj=obj, name=attribute)
        return super().getattr(obj, attribute)


def _failure(path: str, message: str) -> RenderResult:
    return RenderResult(message=None, errors=[ValidationError(path=path, message=message)])


class TemplateRenderer:
    """Turn template text plus form data into message JSON.

    Helpers are plain functions given at construction time and installed on
    this renderer's own Jinja2 environment, so two renderers never share
    helper state. A top-level data key named like a helper never hides it.
    """

    def __init__(
        self,
        helpers: Mapping[str, Callable[..., Any]] | None = None,
        max_patch_depth: int = MAX_PATCH_DEPTH_DEFAULT,
        cache_size: int = TEMPLATE_CACHE_SIZE_DEFAULT,
    ):
        self.helpers = dict(DEFAULT_HELPERS if helpers is None else helpers)
        self.max_patch_depth = max_patch_depth

        self.jinja_env = FormDataEnvironment(
            autoescape=False,
            undefined=ChainableUndefined,
            keep_trailing_newline=True,
        )
        self.jinja_env.globals.update(self.helpers)
        if "json" in self.helpers:
            self.jinja_env.filters["json"] = self.helpers["json"]

        self._compile = lru_cache(maxsize=cache_size)(self.jinja_env.from_string)

    def render(
        self,
        template_text: str,
        data: dict[str, Any],
        mode: RenderMode | None = None,
    ) -> RenderResult:
        """Render ``template_text`` against ``data``.

        Args:
            template_text: Template source
            data: Form data snapshot
            mode: Render mode stored with the template; sniffed from the
                text when not given

        Returns:
            The parsed message, or None with the errors that prevented it
        """
        if not template_text or not template_text.strip():
            return _failure(PATH_TEMPLATE_TEXT, _("Template text is empty"))

        data = data or {}
        mode = mode or detect_render_mode(template_text)

        try:
            if mode is RenderMode.GRAMMAR:
                rendered = self._compile(template_text).render({**data, **self.helpers})
            elif mode is RenderMode.LEGACY:
                rendered, errors = interpolate(template_text, data)
                if rendered is None:
                    return RenderResult(message=None, errors=errors)
            else:
                rendered = template_text

            try:
                parsed = json.loads(rendered, parse_constant=_reject_constant)
            except ValueError as e:
                logger.debug("Rendered text is not valid JSON: %s", e)
                return _failure(
                    PATH_TEMPLATE_TEXT,
                    _("Rendered template is not valid JSON: {error}").format(error=e),
                )

            parsed = apply_inline_patches(parsed, self.max_patch_depth)
            parsed = apply_message_patch(parsed, get_value(data, MESSAGE_PATCH_PATH))
            return RenderResult(message=parsed, errors=[])

        except TemplateSyntaxError as e:
            logger.warning("Template syntax error at line %s: %s", e.lineno, e.message)
            return _failure(
                PATH_TEMPLATE_TEXT,
                _("Template syntax error at line {line}: {error}").format(
                    line=e.lineno, error=e.message
                ),
            )
        except Exception as e:
            logger.warning("Render failed: %s", e, exc_info=True)
            return _failure(PATH_ROOT, _("Render failed: {error}").format(error=e))
