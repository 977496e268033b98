"""Google Cloud Text-to-Speech provider implementation."""

from __future__ import annotations

import logging
import os
import time

from google.api_core import exceptions as google_exceptions
from google.cloud import texttospeech

from .base import SpeechProvider, SpeechRequest, SpeechResponse
from .config import ProviderConfig
from .exceptions import ProviderResponseError, UpstreamError
from .pricing import estimate_speech_cost

logger = logging.getLogger(__name__)


class GoogleSpeechProvider(SpeechProvider):
    name = "google"

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        self._client: texttospeech.TextToSpeechAsyncClient | None = None

    def _get_client(self) -> texttospeech.TextToSpeechAsyncClient:
        # The async client binds to the running event loop, so it is created on first use.
        if self._client is None:
            credentials_path = self._config.settings.credentials_path
            if credentials_path and os.path.exists(credentials_path):
                self._client = texttospeech.TextToSpeechAsyncClient.from_service_account_file(
                    credentials_path
                )
                logger.info("Google TTS client initialised from service account file")
            else:
                self._client = texttospeech.TextToSpeechAsyncClient()
                logger.info("Google TTS client initialised from default credentials")
        return self._client

    async def synthesize(self, request: SpeechRequest) -> SpeechResponse:
        client = self._get_client()
        start = time.perf_counter()
        try:
            response = await client.synthesize_speech(
                input=texttospeech.SynthesisInput(text=request.text),
                voice=texttospeech.VoiceSelectionParams(
                    language_code=request.language_code,
                    name=request.voice_name,
                ),
                audio_config=texttospeech.AudioConfig(
                    audio_encoding=texttospeech.AudioEncoding[request.audio_encoding],
                ),
            )
        except google_exceptions.GoogleAPICallError as err:
            raise UpstreamError(f"Google TTS API error: {err}") from err
        latency_ms = (time.perf_counter() - start) * 1000

        if not response.audio_content:
            raise ProviderResponseError("No audio content returned from TTS API")

        characters = len(request.text)
        return SpeechResponse(
            audio_content=response.audio_content,
            raw=response,
            model=self._config.model,
            characters=characters,
            cost_usd=estimate_speech_cost(self._config.name, request.voice_name, characters),
            latency_ms=latency_ms,
        )
