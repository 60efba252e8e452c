#!/usr/bin/env python3
"""
Text-to-speech fallback dispatcher.

Replies are spoken through an ordered chain of providers:

1. Cartesia (WAV)
2. ElevenLabs (MPEG)
3. The browser's own speech engine, which the widget falls back to on its own
   when this module reports that every server-side provider failed.

Each provider is tried once, in order. A provider without an API key is
skipped; a provider that errors or answers non-2xx is logged and the next one
is tried. The first audio returned wins.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import requests
from pydantic import BaseModel

from ..schemas.io_models import TTSRequest
from ..utils.logger import get_logger
from .config import Config, is_configured
from .preprocess import SpeechPreprocessor

logger = get_logger("tts")

DEFAULT_CARTESIA_VOICE = "be79f378-47fe-4f9c-b92b-f02cefa62ccf"
# ElevenLabs voice id the widget sends -> closest Cartesia voice
CARTESIA_VOICE_MAPPING = {
    "iWNf11sz1GrUE4ppxTOL": DEFAULT_CARTESIA_VOICE,
}


class TTSProviderError(Exception):
    """Raised by a provider that could not return audio."""


class AllProvidersFailedError(Exception):
    """Raised when no server-side provider produced audio."""


class EmptyTextError(ValueError):
    """Raised when there is nothing left to speak."""


class AudioResult(BaseModel):
    provider: str
    content_type: str
    audio: bytes
    language: str


class TTSProvider(ABC):
    name: str = "base"
    content_type: str = "application/octet-stream"

    def __init__(self, api_key: Optional[str] = None, timeout: float = Config.HTTP_TIMEOUT_SECONDS):
        self.api_key = api_key
        self.timeout = timeout

    def is_configured(self) -> bool:
        return is_configured(self.api_key)

    @abstractmethod
    def synthesize(self, text: str, language: str, request: TTSRequest) -> bytes:
        """Return audio bytes or raise TTSProviderError / requests.RequestException."""
        ...

    def _post(self, url: str, headers: dict, body: dict) -> bytes:
        response = requests.post(url, headers=headers, json=body, timeout=self.timeout)
        if not response.ok:
            raise TTSProviderError(f"{self.name} failed with status {response.status_code}: {response.text}")
        if not response.content:
            raise TTSProviderError(f"{self.name} returned no audio")
        return response.content


class CartesiaProvider(TTSProvider):
    name = "cartesia"
    content_type = "audio/wav"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(api_key if api_key is not None else Config.CARTESIA_API_KEY, **kwargs)

    def build_body(self, text: str, language: str, request: TTSRequest) -> dict:
        return {
            "model_id": request.cartesia_model_id or "sonic-multilingual",
            "transcript": text,
            "voice": {
                "mode": "id",
                "id": CARTESIA_VOICE_MAPPING.get(request.voice_id, DEFAULT_CARTESIA_VOICE),
                "__experimental_controls": {
                    "speed": request.speed or "normal",
                    "emotion": request.emotions or ["positivity"],
                },
            },
            "output_format": {
                "container": "wav",
                "encoding": "pcm_s16le",
                "sample_rate": 44100,
            },
            "language": language,
        }

    def synthesize(self, text: str, language: str, request: TTSRequest) -> bytes:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Cartesia-Version": Config.CARTESIA_VERSION,
            "Content-Type": "application/json",
        }
        return self._post(Config.CARTESIA_API_URL, headers, self.build_body(text, language, request))


class ElevenLabsProvider(TTSProvider):
    name = "elevenlabs"
    content_type = "audio/mpeg"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(api_key if api_key is not None else Config.ELEVENLABS_API_KEY, **kwargs)

    def build_body(self, text: str, request: TTSRequest) -> dict:
        return {
            "text": text,
            "model_id": request.model_id or "eleven_multilingual_v2",
            "voice_settings": {
                "stability": request.stability or 0.6,
                "similarity_boost": request.similarity_boost or 0.8,
            },
        }

    def synthesize(self, text: str, language: str, request: TTSRequest) -> bytes:
        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.api_key,
        }
        url = f"{Config.ELEVENLABS_API_URL}/{request.voice_id}"
        return self._post(url, headers, self.build_body(text, request))


class SpeechSynthesizer:
    """Runs a TTS request down the provider chain."""

    def __init__(self, providers: Optional[List[TTSProvider]] = None,
                 preprocessor: Optional[SpeechPreprocessor] = None):
        self.providers = providers if providers is not None else [CartesiaProvider(), ElevenLabsProvider()]
        self.preprocessor = preprocessor or SpeechPreprocessor()

    def synthesize(self, request: TTSRequest) -> AudioResult:
        if not request.text.strip():
            raise EmptyTextError("Text cannot be empty")

        text, detected, corrected = self.preprocessor.prepare(request.text)
        if not text:
            raise EmptyTextError("Nothing to speak after cleaning")
        language = request.language or detected

        logger.info("TTS: Attempting synthesis for text: %s...", text[:50])
        logger.info("TTS: Text length: %d, language: %s", len(text), language)
        if corrected:
            logger.info("TTS: Applied pronunciation corrections")

        for provider in self.providers:
            if not provider.is_configured():
                logger.info("TTS: %s API key not configured, skipping...", provider.name)
                continue
            try:
                logger.info("TTS: Attempting %s API...", provider.name)
                audio = provider.synthesize(text, language, request)
            except (TTSProviderError, requests.exceptions.RequestException) as e:
                logger.warning("TTS: %s error: %s", provider.name, e)
                continue
            logger.info("TTS: %s success! Audio size: %d bytes", provider.name, len(audio))
            return AudioResult(provider=provider.name, content_type=provider.content_type,
                               audio=audio, language=language)

        logger.error("TTS: All server-side providers failed")
        raise AllProvidersFailedError("Speech synthesis unavailable - please check API configuration")
