"""Template renderer unit tests"""

import json

import pytest

from flexshare.enums import RenderMode
from flexshare.render import TemplateRenderer
from flexshare.render.helpers import to_json


@pytest.fixture
def renderer():
    return TemplateRenderer()


def _only_error(result):
    assert result.message is None
    assert len(result.errors) == 1
    return result.errors[0]


# ========== Failures ==========


@pytest.mark.parametrize("text", ["", "   \n"])
def test_blank_template_text(renderer, text):
    """Test that empty template text is a templateText error."""
    error = _only_error(renderer.render(text, {}))

    assert error.path == "templateText"


def test_rendered_text_must_be_json(renderer):
    """Test that output which is not JSON is reported."""
    error = _only_error(renderer.render('{"a": {{ json(a) }}', {"a": 1}))

    assert error.path == "templateText"
    assert "not valid JSON" in error.message


def test_bare_missing_value_breaks_json(renderer):
    """Test a missing value printed without json yields invalid JSON."""
    error = _only_error(renderer.render('{"a": {{ missing }}}', {}))

    assert error.path == "templateText"


def test_syntax_error(renderer):
    """Test that a template syntax error is reported, not raised."""
    error = _only_error(renderer.render('{"a": {{ json(a) }', {"a": 1}))

    assert error.path == "templateText"
    assert "syntax error" in error.message


def test_raising_helper_becomes_root_error():
    """Test an exception from a helper becomes a root error."""
    def boom():
        raise ValueError("helper exploded")

    renderer = TemplateRenderer(helpers={"json": to_json, "boom": boom})

    error = _only_error(renderer.render('{"a": {{ boom() }}}', {}))

    assert error.path == "root"
    assert "helper exploded" in error.message


def test_patch_depth_limit_becomes_root_error():
    """Test that exceeding patch depth becomes a root error."""
    renderer = TemplateRenderer(max_patch_depth=2)
    text = '{"__patch": {"__patch": {"__patch": {"a": 1}}}}'

    error = _only_error(renderer.render(text, {}))

    assert error.path == "root"


def test_legacy_missing_variable(renderer):
    """Test missing placeholders in legacy mode are reported by path."""
    result = renderer.render('{"t": "${data.title}"}', {})

    assert result.message is None
    assert [e.path for e in result.errors] == ["data.title"]


# ========== Grammar mode ==========


def test_json_helper_escapes_user_text(renderer):
    """Test user text with quotes renders to valid JSON."""
    title = 'He said "hi"\nthen left'

    result = renderer.render('{"text": {{ json(title) }}}', {"title": title})

    assert result.errors == []
    assert result.message == {"text": title}


def test_missing_value_through_json_is_null(renderer):
    """Test a missing value passed through json renders null."""
    result = renderer.render('{"a": {{ json(page.imageUrl) }}}', {})

    assert result.message == {"a": None}


def test_loop_sees_outer_scope(renderer):
    """Test loop bodies can read values outside the loop."""
    text = (
        '[{% for page in pages %}'
        '{"color": {{ json(default(page.color, style.color)) }}, '
        '"title": {{ json(title) }}}'
        '{% if not loop.last %},{% endif %}{% endfor %}]'
    )
    data = {
        "title": "Deck",
        "style": {"color": "#000000"},
        "pages": [{"color": "#ff0000"}, {}],
    }

    result = renderer.render(text, data)

    assert result.message == [
        {"color": "#ff0000", "title": "Deck"},
        {"color": "#000000", "title": "Deck"},
    ]


def test_conditionals_with_helpers(renderer):
    """Test helpers used inside if blocks."""
    text = (
        '{"style": {{ json(style) }}'
        '{% if and_(ne(style, "link"), default(color, none)) %}, "color": {{ json(color) }}{% endif %}'
        "}"
    )

    assert renderer.render(text, {"style": "primary", "color": "#06C755"}).message == {
        "style": "primary",
        "color": "#06C755",
    }
    assert renderer.render(text, {"style": "link", "color": "#06C755"}).message == {
        "style": "link"
    }
    assert renderer.render(text, {"style": "primary", "color": ""}).message == {
        "style": "primary"
    }


def test_custom_helpers_replace_defaults():
    """Test helpers passed to the renderer replace the defaults."""
    renderer = TemplateRenderer(
        helpers={"json": to_json, "shout": lambda s: s.upper()}
    )

    result = renderer.render('{"a": {{ json(shout(name)) }}}', {"name": "hey"})

    assert result.message == {"a": "HEY"}


def test_renderers_do_not_share_helpers():
    """Test one renderer's helpers do not leak into another."""
    custom = TemplateRenderer(helpers={"json": lambda v: '"custom"'})
    standard = TemplateRenderer()
    text = '{"a": {{ json(a) }}}'

    assert custom.render(text, {"a": 1}).message == {"a": "custom"}
    assert standard.render(text, {"a": 1}).message == {"a": 1}


# ========== Other modes ==========


def test_raw_json(renderer):
    """Test raw JSON templates are parsed as is."""
    result = renderer.render('{"type": "flex", "altText": "static"}', {"ignored": True})

    assert result.message == {"type": "flex", "altText": "static"}


def test_legacy_substitution(renderer):
    """Test legacy placeholders are filled from data."""
    result = renderer.render('{"t": "${data.title}", "n": ${data.count}}', {"title": "Hi", "count": 2})

    assert result.errors == []
    assert result.message == {"t": "Hi", "n": 2}


def test_explicit_mode_skips_detection(renderer):
    """Test an explicit render mode is used over the sniffed one."""
    text = '{"t": "${data.title}"}'

    result = renderer.render(text, {}, mode=RenderMode.RAW_JSON)

    assert result.message == {"t": "${data.title}"}


# ========== Patches ==========


def test_inline_patch_from_data(renderer):
    """Test an inline patch supplied through form data is applied."""
    text = '{"type": "button", "height": "sm", "__patch": {{ json(patch) }}}'

    result = renderer.render(text, {"patch": '{"height": "md", "margin": "lg"}'})

    assert result.message == {"type": "button", "height": "md", "margin": "lg"}


def test_null_inline_patch_is_dropped(renderer):
    """Test a null inline patch leaves no key behind."""
    text = '{"type": "button", "__patch": {{ json(patch) }}}'

    assert renderer.render(text, {}).message == {"type": "button"}


def test_message_patch_applied_last(renderer):
    """Test the message patch applies after inline patches."""
    text = '{"altText": {{ json(altText) }}, "contents": {"size": "mega", "__patch": {"size": "kilo"}}}'
    data = {
        "altText": "Hi",
        "advanced": {"messagePatch": json.dumps({"contents": {"size": "giga"}})},
    }

    result = renderer.render(text, data)

    assert result.message == {"altText": "Hi", "contents": {"size": "giga"}}


def test_message_patch_as_object(renderer):
    """Test a message patch given as an object."""
    data = {"advanced": {"messagePatch": {"altText": "patched"}}}

    result = renderer.render('{"altText": "original"}', data)

    assert result.message == {"altText": "patched"}


def test_render_is_repeatable(renderer):
    """Test rendering the same input twice gives equal results."""
    text = '{"a": {{ json(a) }}, "__patch": {{ json(p) }}}'
    data = {"a": [1, 2], "p": {"b": True}}

    first = renderer.render(text, data)
    second = renderer.render(text, data)

    assert first.message == second.message == {"a": [1, 2], "b": True}
    assert data == {"a": [1, 2], "p": {"b": True}}


def test_without_template_cache():
    """Test rendering with the template cache disabled."""
    renderer = TemplateRenderer(cache_size=0)

    assert renderer.render('{"a": {{ json(a) }}}', {"a": 1}).message == {"a": 1}


# ========== Form data lookup ==========


@pytest.mark.parametrize("key", ["items", "values", "keys", "get", "update", "copy", "pop"])
def test_dotted_access_reads_keys_named_like_dict_methods(renderer, key):
    """Test dotted access returns the data value for method-like keys"""
    text = '{"v": {{ json(page.%s) }}}' % key

    result = renderer.render(text, {"page": {key: "hello"}})

    assert result.errors == []
    assert result.message == {"v": "hello"}


def test_dotted_access_to_absent_method_name_is_null(renderer):
    """Test a missing key named like a dict method renders as null"""
    result = renderer.render('{"v": {{ json(page.items) }}}', {"page": {}})

    assert result.message == {"v": None}


@pytest.mark.parametrize("key", ["json", "default", "eq", "ne", "hasItems", "and_"])
def test_data_keys_do_not_hide_helpers(renderer, key):
    """Test top-level data keys named like helpers leave the helpers usable"""
    text = (
        '{"a": {{ json(default(altText, "fallback")) }}, '
        '"same": {{ json(and_(eq(altText, "x"), not ne(altText, "x"), hasItems(list))) }}}'
    )

    result = renderer.render(text, {"altText": "x", "list": [1], key: "oops"})

    assert result.errors == []
    assert result.message == {"a": "x", "same": True}


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_non_json_constants_are_rejected(renderer, constant):
    """Test NaN and Infinity in rendered output are a JSON parse error"""
    error = _only_error(renderer.render('{"flex": %s, "a": {{ json(a) }}}' % constant, {"a": 1}))

    assert error.path == "templateText"
    assert constant.lstrip("-") in error.message


def test_non_json_constant_in_raw_template(renderer):
    """Test a raw JSON template holding NaN is a JSON parse error"""
    error = _only_error(renderer.render('{"type": "flex", "size": NaN}', {}))

    assert error.path == "templateText"


def test_statement_only_template_renders_as_grammar(renderer):
    """Test a template using only statement tags is rendered by Jinja2"""
    text = '[{% for page in pages %}"x"{% if not loop.last %},{% endif %}{% endfor %}]'

    result = renderer.render(text, {"pages": [1, 2]})

    assert result.message == ["x", "x"]
