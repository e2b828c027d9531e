"""
Notice Validator Tests
======================

Field-level validation of raw submissions into TextSubmission /
FileSubmission values.
"""

import pytest

from app.core.exceptions import ValidationError
from app.models.notice import ContentType
from app.services.notice_validator import (
    FileSubmission,
    TextSubmission,
    UploadDescriptor,
    kind_for_mime,
    normalize_mime,
    parse_priority,
    size_ceiling,
    validate_submission,
)

MB = 1024 * 1024


def fields(result):
    return [e.field for e in result.errors]


class TestTextSubmissions:

    def test_exam_schedule_scenario(self):
        result = validate_submission(
            title="Exam Schedule", notice_type="text", priority="1", content="Exams start Monday",
        )
        assert result.ok
        assert result.submission == TextSubmission(
            title="Exam Schedule", content="Exams start Monday", priority=1,
        )

    @pytest.mark.parametrize("title,content,ok", [
        ("Notice", "Body", True),
        ("  ", "Body", False),
        ("Notice", "   \n\t", False),
        (None, "Body", False),
        ("Notice", None, False),
    ])
    def test_success_iff_title_and_content_non_blank(self, title, content, ok):
        result = validate_submission(title=title, notice_type="text", content=content)
        assert result.ok is ok

    def test_file_is_ignored_for_text(self):
        upload = UploadDescriptor(file_name="evil.exe", mime_type="application/x-msdownload", size=99 * MB)
        result = validate_submission(title="T", notice_type="text", content="C", upload=upload)
        assert result.ok
        assert isinstance(result.submission, TextSubmission)

    def test_title_and_content_are_trimmed(self):
        result = validate_submission(title="  Holiday ", notice_type="TEXT", content=" Closed Friday  ")
        assert result.submission.title == "Holiday"
        assert result.submission.content == "Closed Friday"


class TestFileSubmissions:

    def test_valid_pdf(self):
        upload = UploadDescriptor(file_name="flyer.pdf", mime_type="application/pdf", size=2 * MB)
        result = validate_submission(title="Flyer", notice_type="pdf", upload=upload)
        assert result.ok
        assert isinstance(result.submission, FileSubmission)
        assert result.submission.kind == ContentType.PDF
        assert result.submission.priority == 3

    def test_missing_file(self):
        result = validate_submission(title="Poster", notice_type="image")
        assert fields(result) == ["file"]

    def test_oversized_image_cites_size(self):
        upload = UploadDescriptor(file_name="poster.png", mime_type="image/png", size=12 * MB)
        result = validate_submission(title="Poster", notice_type="image", upload=upload)
        assert not result.ok
        assert fields(result) == ["file"]
        assert "too large" in result.errors[0].message.lower()
        assert "10MB" in result.errors[0].message

    def test_video_uses_larger_ceiling(self):
        upload = UploadDescriptor(file_name="tour.mp4", mime_type="video/mp4", size=30 * MB)
        assert validate_submission(title="Tour", notice_type="video", upload=upload).ok

    def test_mime_must_match_declared_type(self):
        upload = UploadDescriptor(file_name="scan.pdf", mime_type="image/png", size=10)
        result = validate_submission(title="Doc", notice_type="pdf", upload=upload)
        assert fields(result) == ["file"]
        assert "application/pdf" in result.errors[0].message

    @pytest.mark.parametrize("mime", [
        "image/jpeg", "image/png", "image/webp", "image/gif", "image/svg+xml", "IMAGE/PNG; charset=binary",
    ])
    def test_image_allow_list(self, mime):
        upload = UploadDescriptor(file_name="x.img", mime_type=mime, size=1)
        assert validate_submission(title="Img", notice_type="image", upload=upload).ok

    @pytest.mark.parametrize("mime", [
        "video/mp4", "video/webm", "video/ogg", "video/quicktime", "video/x-msvideo", "video/x-matroska",
    ])
    def test_video_allow_list(self, mime):
        upload = UploadDescriptor(file_name="clip", mime_type=mime, size=1)
        assert validate_submission(title="Clip", notice_type="video", upload=upload).ok

    def test_unknown_size_is_left_to_the_store(self):
        upload = UploadDescriptor(file_name="a.pdf", mime_type="application/pdf", size=None)
        assert validate_submission(title="A", notice_type="pdf", upload=upload).ok

    def test_extension_must_match_declared_type(self):
        upload = UploadDescriptor(file_name="poster.pdf", mime_type="image/png", size=4)
        result = validate_submission(title="Poster", notice_type="image", upload=upload)
        assert fields(result) == ["file"]
        assert "poster.pdf" in result.errors[0].message
        assert "image" in result.errors[0].message

    @pytest.mark.parametrize("file_name", ["poster.PNG", "poster", "poster.img", "scan.jpeg"])
    def test_matching_or_unknown_extension_is_accepted(self, file_name):
        upload = UploadDescriptor(file_name=file_name, mime_type="image/png", size=4)
        assert validate_submission(title="Poster", notice_type="image", upload=upload).ok


class TestPriority:

    @pytest.mark.parametrize("raw,expected", [
        (1, 1), (5, 5), ("2", 2), (" 4 ", 4), (3.0, 3), ("1.0", 1),
    ])
    def test_valid_values(self, raw, expected):
        assert parse_priority(raw) == expected

    def test_absent_defaults_to_three(self):
        assert parse_priority() == 3
        assert parse_priority(None) == 3
        result = validate_submission(title="T", notice_type="text", content="C")
        assert result.submission.priority == 3

    @pytest.mark.parametrize("raw", [0, 6, "9", "high", "", 2.5, True, [1]])
    def test_present_but_invalid_is_rejected(self, raw):
        result = validate_submission(title="T", notice_type="text", content="C", priority=raw)
        assert fields(result) == ["priority"]


class TestErrorReporting:

    def test_every_violated_field_is_reported(self):
        result = validate_submission(title="", notice_type="text", priority="7", content="")
        assert fields(result) == ["title", "priority", "content"]

    def test_missing_notice_type_has_no_default(self):
        result = validate_submission(title="T", notice_type=None, content="C")
        assert fields(result) == ["noticeType"]
        assert result.errors[0].message == "Notice type is required"

    def test_unknown_notice_type(self):
        result = validate_submission(title="T", notice_type="audio", content="C")
        assert fields(result) == ["noticeType"]
        assert "text, pdf, image, video" in result.errors[0].message

    def test_raise_for_errors(self):
        result = validate_submission(title="", notice_type="pdf")
        with pytest.raises(ValidationError) as exc_info:
            result.raise_for_errors()
        assert exc_info.value.fields == ["title", "file"]


class TestHelpers:

    def test_normalize_mime(self):
        assert normalize_mime("Video/MP4 ; codecs=avc1") == "video/mp4"
        assert normalize_mime(None) == ""

    def test_kind_for_mime(self):
        assert kind_for_mime("application/pdf") == ContentType.PDF
        assert kind_for_mime("video/webm") == ContentType.VIDEO
        assert kind_for_mime("text/plain") is None

    def test_size_ceiling(self):
        assert size_ceiling(ContentType.IMAGE) == 10 * MB
        assert size_ceiling(ContentType.PDF) == 10 * MB
        assert size_ceiling(ContentType.VIDEO) == 45 * MB
