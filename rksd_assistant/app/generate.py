#!/usr/bin/env python3
"""
Generation module for the RKSD College assistant.

This module handles answer generation using the Groq chat-completions API.
"""

import requests
from typing import Dict, List, Optional
from .config import Config, is_configured
from ..utils.logger import get_logger

logger = get_logger("generate")


class GenerationError(Exception):
    """Raised when the chat-completion call does not produce an answer."""


class GenerationClient:
    """Client for generating answers using the Groq LLM API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        """Initialize the generation client."""
        self.api_key = api_key if api_key is not None else Config.GROQ_API_KEY
        self.llm_model = model or Config.GROQ_MODEL
        self.api_base_url = Config.GROQ_API_URL

        if not is_configured(self.api_key):
            logger.warning("GROQ_API_KEY not found in environment variables")

    def generate_answer(self, messages: List[Dict[str, str]]) -> str:
        """
        Generate an answer using the Groq LLM.

        Args:
            messages: Chat messages (system prompt first, then the user turn)

        Returns:
            Generated answer text
        """
        if not is_configured(self.api_key):
            raise GenerationError("Groq API key is not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }
        payload = {
            "messages": messages,
            "model": self.llm_model,
            "max_tokens": Config.GROQ_MAX_TOKENS,
            "temperature": Config.GROQ_TEMPERATURE,
        }

        try:
            response = requests.post(
                self.api_base_url,
                headers=headers,
                json=payload,
                timeout=Config.HTTP_TIMEOUT_SECONDS
            )
        except requests.exceptions.RequestException as e:
            raise GenerationError(f"Groq API error: {e}") from e

        if not response.ok:
            logger.warning("Groq API unavailable: %s %s", response.status_code, response.text)
            raise GenerationError(f"Groq API returned status {response.status_code}")

        try:
            data = response.json()
            answer = (data["choices"][0]["message"]["content"] or "").strip()
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationError(f"Error parsing generation response: {e}") from e

        if not answer:
            raise GenerationError("Groq API returned an empty answer")

        logger.info("Generated answer, length: %d", len(answer))
        return answer
