"""Tests for multipart form assembly."""

import pytest

from openai_rest.errors import InvalidRequestError, LocalFileError, OpenAIError
from openai_rest.multipart import (
    FILE_UPLOAD_FIELDS,
    IMAGE_EDIT_FIELDS,
    IMAGE_VARIATION_FIELDS,
    TRANSCRIPTION_FIELDS,
    TRANSLATION_FIELDS,
    FormPart,
    build_form_parts,
    format_scalar,
    read_file,
    to_httpx_files,
)


@pytest.fixture
def png(tmp_path):
    path = tmp_path / "cat.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n")
    return path


class TestFormatScalar:
    """Tests for scalar to text conversion."""

    def test_string_passes_through(self):
        assert format_scalar("whisper-1") == "whisper-1"

    def test_integer(self):
        assert format_scalar(2) == "2"

    def test_float_keeps_precision(self):
        """Test that floats use the shortest exact decimal."""
        assert format_scalar(0.2) == "0.2"
        assert format_scalar(0.123456789) == "0.123456789"
        assert format_scalar(1.0) == "1.0"

    def test_bool(self):
        assert format_scalar(True) == "true"
        assert format_scalar(False) == "false"

    def test_list_as_json(self):
        assert format_scalar(["word", "segment"]) == '["word", "segment"]'


class TestBuildFormParts:
    """Tests for build_form_parts."""

    def test_file_field_reads_content(self, png):
        """Test that a file field becomes a part with the file's bytes."""
        parts = build_form_parts({"image": str(png)}, IMAGE_VARIATION_FIELDS)

        assert parts == [
            FormPart(
                name="image",
                content=b"\x89PNG\r\n\x1a\n",
                filename=str(png),
                content_type="image/png",
            )
        ]

    def test_text_field(self):
        """Test that a scalar field has no file name or content type."""
        parts = build_form_parts({"purpose": "fine-tune"}, FILE_UPLOAD_FIELDS)

        assert parts == [FormPart(name="purpose", content=b"fine-tune")]

    def test_declared_order_wins(self, png):
        """Test that parts follow the schema order, not the request order."""
        request = {
            "user": "u-1",
            "response_format": "url",
            "size": "512x512",
            "n": 2,
            "model": "dall-e-2",
            "mask": str(png),
            "prompt": "add a hat",
            "image": str(png),
        }

        parts = build_form_parts(request, IMAGE_EDIT_FIELDS)

        assert [part.name for part in parts] == [
            "image",
            "prompt",
            "mask",
            "model",
            "n",
            "size",
            "response_format",
            "user",
        ]

    def test_variation_order(self, png):
        request = {"size": "256x256", "image": str(png), "n": 1, "model": "dall-e-2"}

        parts = build_form_parts(request, IMAGE_VARIATION_FIELDS)

        assert [part.name for part in parts] == ["image", "model", "n", "size"]

    def test_missing_fields_are_omitted(self):
        """Test that absent fields are skipped without error."""
        parts = build_form_parts({"model": "whisper-1"}, TRANSCRIPTION_FIELDS)

        assert [part.name for part in parts] == ["model"]

    def test_unknown_fields_are_ignored(self):
        parts = build_form_parts({"model": "whisper-1", "stream": True}, TRANSLATION_FIELDS)

        assert [part.name for part in parts] == ["model"]

    def test_transcription_media_type(self, tmp_path):
        """Test that audio files are sent as audio/mpeg."""
        audio = tmp_path / "speech.mp3"
        audio.write_bytes(b"ID3")

        parts = build_form_parts(
            {"file": str(audio), "model": "whisper-1", "temperature": 0.2, "language": "en"},
            TRANSCRIPTION_FIELDS,
        )

        assert parts[0].content_type == "audio/mpeg"
        assert [(part.name, part.content) for part in parts[1:]] == [
            ("model", b"whisper-1"),
            ("language", b"en"),
            ("temperature", b"0.2"),
        ]

    def test_translation_has_no_language(self, tmp_path):
        audio = tmp_path / "speech.mp3"
        audio.write_bytes(b"ID3")

        parts = build_form_parts({"file": str(audio), "language": "de"}, TRANSLATION_FIELDS)

        assert [part.name for part in parts] == ["file"]

    def test_upload_media_type(self, tmp_path):
        data = tmp_path / "train.jsonl"
        data.write_text('{"prompt": "a"}\n')

        parts = build_form_parts({"file": str(data), "purpose": "fine-tune"}, FILE_UPLOAD_FIELDS)

        assert parts[0].content_type == "application/json"
        assert parts[0].filename == str(data)

    def test_request_is_not_modified(self, png):
        request = {"image": str(png), "n": 3}
        snapshot = dict(request)

        build_form_parts(request, IMAGE_VARIATION_FIELDS)

        assert request == snapshot

    def test_missing_file_raises_local_file_error(self, tmp_path):
        """Test that an unreadable file path raises LocalFileError."""
        missing = tmp_path / "nope.png"

        with pytest.raises(LocalFileError) as exc_info:
            build_form_parts({"image": str(missing)}, IMAGE_VARIATION_FIELDS)

        assert exc_info.value.path == str(missing)
        assert "could not read local file" in str(exc_info.value)
        assert isinstance(exc_info.value, OpenAIError)

    @pytest.mark.parametrize("request_body", ["file", ["file"], None])
    def test_non_object_request_raises(self, request_body):
        """Test that a request that is not a mapping raises InvalidRequestError."""
        with pytest.raises(InvalidRequestError) as exc_info:
            build_form_parts(request_body, FILE_UPLOAD_FIELDS)

        assert "request must be an object" in str(exc_info.value)

    @pytest.mark.parametrize("value", [None, 3, ["a.png"]])
    def test_non_path_file_field_raises(self, value):
        """Test that a file field that is not a path raises InvalidRequestError."""
        with pytest.raises(InvalidRequestError) as exc_info:
            build_form_parts({"image": value}, IMAGE_VARIATION_FIELDS)

        assert "'image' must be a local file path" in str(exc_info.value)
        assert isinstance(exc_info.value, OpenAIError)


class TestReadFile:
    def test_read_file(self, png):
        assert read_file(png) == b"\x89PNG\r\n\x1a\n"

    def test_directory_is_not_readable(self, tmp_path):
        with pytest.raises(LocalFileError):
            read_file(tmp_path)


class TestToHttpxFiles:
    def test_renders_ordered_tuples(self):
        parts = [
            FormPart("file", b"{}", filename="a.jsonl", content_type="application/json"),
            FormPart("purpose", b"batch"),
        ]

        assert to_httpx_files(parts) == [
            ("file", ("a.jsonl", b"{}", "application/json")),
            ("purpose", (None, b"batch")),
        ]
