#!/usr/bin/env python3
"""
Configuration management for the RKSD College assistant backend.
"""

import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Keys shipped in .env.example; treated the same as "not configured"
PLACEHOLDER_KEYS = ("your_cartesia_api_key_here", "your_elevenlabs_api_key_here", "your_groq_api_key_here")


def is_configured(api_key):
    """Return True when an API key is set and is not a template placeholder."""
    return bool(api_key) and api_key not in PLACEHOLDER_KEYS


class Config:
    """Configuration class for the application."""

    # Groq API Configuration
    GROQ_API_KEY = os.getenv("GROQ_API_KEY")
    GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
    GROQ_MAX_TOKENS = 500
    GROQ_TEMPERATURE = 0.7

    # TTS Provider Configuration
    CARTESIA_API_KEY = os.getenv("CARTESIA_API_KEY")
    CARTESIA_API_URL = "https://api.cartesia.ai/tts/bytes"
    CARTESIA_VERSION = "2025-04-16"
    ELEVENLABS_API_KEY = os.getenv("ELEVENLABS_API_KEY")
    ELEVENLABS_API_URL = "https://api.elevenlabs.io/v1/text-to-speech"
    TTS_MAX_CHARS = 1500

    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", 30))

    # Storage Configuration (memory|database)
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
    DATABASE_URL = os.getenv("DATABASE_URL")
    COLLEGE_INFO_PATH = os.path.join(os.path.dirname(__file__), "..", "data", "raw", "college_info.json")
    MAX_CHAT_MESSAGES = 50

    # Server Configuration
    APP_ENV = os.getenv("APP_ENV", "production").lower()
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", 5000))
    STATIC_DIR = os.getenv("STATIC_DIR", os.path.join(os.path.dirname(__file__), "..", "..", "client", "dist"))
    ALLOWED_ORIGINS = [
        "http://silver-coyote-528857.hostingersite.com",
        "https://silver-coyote-528857.hostingersite.com",
        "http://localhost:5000",
        "http://localhost:3000",
        "http://127.0.0.1:5000",
        "https://college-voice-assistance.onrender.com",
    ] + [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
    ALLOWED_ORIGIN_REGEX = r"^https?://((.*\.)?hostingersite\.com|localhost|127\.0\.0\.1)(:\d+)?/?$"

    @classmethod
    def debug_print(cls):
        print(f"[CONFIG] APP_ENV={cls.APP_ENV} STORAGE_BACKEND={cls.STORAGE_BACKEND}")
        print(f"[CONFIG] GROQ_MODEL={cls.GROQ_MODEL} set={is_configured(cls.GROQ_API_KEY)}")
        print(f"[CONFIG] CARTESIA set={is_configured(cls.CARTESIA_API_KEY)}")
        print(f"[CONFIG] ELEVENLABS set={is_configured(cls.ELEVENLABS_API_KEY)}")

    @classmethod
    def is_development(cls):
        return cls.APP_ENV == "development"

    @classmethod
    def validate(cls):
        """Validate that the configuration is usable."""
        problems = []

        if cls.STORAGE_BACKEND not in ("memory", "database"):
            problems.append(f"STORAGE_BACKEND must be 'memory' or 'database', got '{cls.STORAGE_BACKEND}'")
        if cls.PORT <= 0:
            problems.append("PORT must be positive")

        if problems:
            raise ValueError(f"Invalid configuration: {'; '.join(problems)}")

        return True

# Validate configuration on import
Config.validate()
