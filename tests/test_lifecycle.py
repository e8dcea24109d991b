from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from flexshare.compiler import compile_template
from flexshare.enums import DocMode, TemplateStatus
from flexshare.errors import PublishException
from flexshare.lifecycle import (
    doc_mode_for,
    initial_doc_data,
    publish_doc,
    publish_template,
    record_validation,
    resolve_share_message,
)
from flexshare.models import Doc, Template

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_initial_data_prefers_sample_data(carousel):
    """Test new documents start from sample data when present."""
    data = initial_doc_data(carousel)
    data["title"] = "changed"

    assert initial_doc_data(carousel)["title"] == "2026 Calendar"


def test_initial_data_from_defaults(legacy_poster_record):
    """Test new documents start from schema defaults otherwise."""
    data = initial_doc_data(legacy_poster_record)

    assert data["altText"] == "View event poster"
    assert data["buttons"] == []


def test_doc_mode(carousel, single_poster):
    assert doc_mode_for(carousel) is DocMode.CAROUSEL
    assert doc_mode_for(single_poster) is DocMode.SINGLE
    assert doc_mode_for(Template(name="Coupon")) is DocMode.SINGLE


def test_record_validation(single_poster):
    """Test recording a compile outcome on a draft."""
    doc = Doc(id="d1", template_id=single_poster.id, data={})
    result = compile_template(single_poster, doc.data)

    recorded = record_validation(doc, result, now=NOW)

    assert recorded.is_valid is False
    assert recorded.validation_errors == result.errors
    assert recorded.preview_json == result.message
    assert recorded.last_validated_at == NOW
    assert doc.is_valid is None


def test_record_validation_in_timezone(single_poster):
    """Test that timestamps are taken in the given timezone when no time is passed."""
    doc = Doc(id="d1", template_id=single_poster.id, data={})
    result = compile_template(single_poster, doc.data)

    recorded = record_validation(doc, result, timezone=ZoneInfo("Asia/Taipei"))

    assert recorded.last_validated_at.utcoffset().total_seconds() == 8 * 3600


class TestPublishDoc:
    def test_publish(self, single_poster, poster_data):
        """Test publishing a valid document."""
        doc = Doc(id="d1", data=poster_data)

        published = publish_doc(doc, single_poster, now=NOW)

        assert published.status is TemplateStatus.PUBLISHED
        assert published.is_valid is True
        assert published.validation_errors == []
        assert published.preview_json["contents"]["type"] == "bubble"
        assert published.updated_at == NOW

    def test_blocked_by_errors(self, carousel):
        """Test publishing is refused when the compile has errors."""
        doc = Doc(id="d2", data={"pages": []}, mode=DocMode.CAROUSEL)

        with pytest.raises(PublishException) as exc_info:
            publish_doc(doc, carousel, now=NOW)

        assert any(e.path == "pages" for e in exc_info.value.errors)
        assert "cannot be published" in str(exc_info.value)


class TestResolveShareMessage:
    def test_uses_valid_cache(self, single_poster):
        """Test a valid cached preview is delivered as is."""
        cached = {
            "type": "flex",
            "altText": "cached",
            "contents": {"type": "bubble"},
        }
        doc = Doc(data={}, preview_json=cached)

        result = resolve_share_message(doc, single_poster)

        assert result.message == cached
        assert result.errors == []

    def test_recompiles_invalid_cache(self, single_poster, poster_data):
        """Test an invalid cached preview is compiled again."""
        doc = Doc(data=poster_data, preview_json={"type": "flex"})

        result = resolve_share_message(doc, single_poster)

        assert result.ok
        assert result.message["altText"] == "x"

    def test_compiles_without_cache(self, single_poster, poster_data):
        result = resolve_share_message(Doc(data=poster_data), single_poster)

        assert result.ok


def test_publish_template(single_poster):
    """Test publishing a template bumps its version."""
    draft = single_poster.model_copy(update={"status": TemplateStatus.DRAFT})

    published = publish_template(draft, now=NOW)

    assert published.status is TemplateStatus.PUBLISHED
    assert published.version == draft.version + 1
    assert published.updated_at == NOW
    assert draft.status is TemplateStatus.DRAFT
