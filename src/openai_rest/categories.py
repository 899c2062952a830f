"""API categories, each a thin set of calls onto the client transport."""

from typing import TYPE_CHECKING, Any, Dict

from .multipart import (
    FILE_UPLOAD_FIELDS,
    IMAGE_EDIT_FIELDS,
    IMAGE_VARIATION_FIELDS,
    TRANSCRIPTION_FIELDS,
    TRANSLATION_FIELDS,
    build_form_parts,
)

if TYPE_CHECKING:
    from .client import OpenAIClient


AUDIO_SPEECH_PATH = "/v1/audio/speech"
AUDIO_TRANSCRIPTIONS_PATH = "/v1/audio/transcriptions"
AUDIO_TRANSLATIONS_PATH = "/v1/audio/translations"
CHAT_COMPLETIONS_PATH = "/v1/chat/completions"
EMBEDDINGS_PATH = "/v1/embeddings"
FILES_PATH = "/v1/files"
FINE_TUNING_JOBS_PATH = "/v1/fine_tuning/jobs"
IMAGES_GENERATIONS_PATH = "/v1/images/generations"
IMAGES_EDITS_PATH = "/v1/images/edits"
IMAGES_VARIATIONS_PATH = "/v1/images/variations"
MODELS_PATH = "/v1/models"
MODERATIONS_PATH = "/v1/moderations"

# Identifiers are appended to paths as given; callers supply URL-safe ids.


class Category:
    def __init__(self, client: "OpenAIClient"):
        self._client = client


class Audio(Category):
    """Speech synthesis, transcription and translation."""

    def speech(self, request: Dict[str, Any]) -> bytes:
        """Generate audio from text.

        Returns:
            The raw audio bytes of the response body
        """
        return self._client.post_raw(AUDIO_SPEECH_PATH, request)

    def transcription(self, request: Dict[str, Any]) -> Any:
        """Transcribe the audio file at request["file"]."""
        parts = build_form_parts(request, TRANSCRIPTION_FIELDS)
        return self._client.post_multipart(AUDIO_TRANSCRIPTIONS_PATH, parts)

    def translation(self, request: Dict[str, Any]) -> Any:
        """Translate the audio file at request["file"] into English."""
        parts = build_form_parts(request, TRANSLATION_FIELDS)
        return self._client.post_multipart(AUDIO_TRANSLATIONS_PATH, parts)


class Chat(Category):
    def create(self, request: Dict[str, Any]) -> Any:
        return self._client.post(CHAT_COMPLETIONS_PATH, request)


class Embeddings(Category):
    def create(self, request: Dict[str, Any]) -> Any:
        return self._client.post(EMBEDDINGS_PATH, request)


class FineTuning(Category):
    """Fine-tuning job management."""

    def create(self, request: Dict[str, Any]) -> Any:
        return self._client.post(FINE_TUNING_JOBS_PATH, request)

    def list(self) -> Any:
        return self._client.get(FINE_TUNING_JOBS_PATH)

    def retrieve(self, job_id: str) -> Any:
        return self._client.get(FINE_TUNING_JOBS_PATH + "/" + job_id)

    def cancel(self, job_id: str) -> Any:
        return self._client.post_text(FINE_TUNING_JOBS_PATH + "/" + job_id + "/cancel", "")

    def events(self, job_id: str) -> Any:
        return self._client.get(FINE_TUNING_JOBS_PATH + "/" + job_id + "/events")

    def checkpoints(self, job_id: str) -> Any:
        return self._client.get(FINE_TUNING_JOBS_PATH + "/" + job_id + "/checkpoints")


class Files(Category):
    """Uploaded file management."""

    def upload(self, request: Dict[str, Any]) -> Any:
        """Upload the local file at request["file"] with request["purpose"]."""
        parts = build_form_parts(request, FILE_UPLOAD_FIELDS)
        return self._client.post_multipart(FILES_PATH, parts)

    def list(self) -> Any:
        return self._client.get(FILES_PATH)

    def retrieve(self, file_id: str) -> Any:
        return self._client.get(FILES_PATH + "/" + file_id)

    def delete(self, file_id: str) -> Any:
        return self._client.delete(FILES_PATH + "/" + file_id)

    def content(self, file_id: str) -> Any:
        """Fetch a file's content; non-JSON content comes back as {"response": text}."""
        return self._client.get(FILES_PATH + "/" + file_id + "/content")


class Images(Category):
    def create(self, request: Dict[str, Any]) -> Any:
        return self._client.post(IMAGES_GENERATIONS_PATH, request)

    def edit(self, request: Dict[str, Any]) -> Any:
        parts = build_form_parts(request, IMAGE_EDIT_FIELDS)
        return self._client.post_multipart(IMAGES_EDITS_PATH, parts)

    def variation(self, request: Dict[str, Any]) -> Any:
        parts = build_form_parts(request, IMAGE_VARIATION_FIELDS)
        return self._client.post_multipart(IMAGES_VARIATIONS_PATH, parts)


class Models(Category):
    def list(self) -> Any:
        return self._client.get(MODELS_PATH)

    def retrieve(self, model: str) -> Any:
        return self._client.get(MODELS_PATH + "/" + model)

    def delete(self, model: str) -> Any:
        return self._client.delete(MODELS_PATH + "/" + model)


class Moderations(Category):
    def create(self, request: Dict[str, Any]) -> Any:
        return self._client.post(MODERATIONS_PATH, request)
