#!/usr/bin/env python3
"""
Preprocessing module for speech synthesis.

This module turns a chat reply into text a TTS engine can read aloud: markdown
and a few emojis are stripped, known mispronunciations are rewritten, and the
text is tagged Hindi or English.
"""

import re
from typing import Dict, Tuple

from .config import Config

# Word replacements that fix Hindi pronunciation in the TTS voices.
pronunciation_corrections: Dict[str, str] = {
    "hai": "hain",
    "ke": "kay",
}

# Romanized Hindi (plus campus words that show up in Hinglish replies)
HINDI_WORDS = {
    "aap", "hai", "hain", "kya", "kaise", "kahan", "namaste", "dhanyawad", "main", "hum",
    "kar", "karo", "karna", "kiya", "ghar", "paani", "khana", "college", "student", "teacher",
    "library", "hostel", "fees", "exam", "result", "madad", "help", "problem", "achha", "bura",
    "naya", "purana", "bada", "chota", "se", "ko", "ke", "ki", "ka", "me", "mein", "par", "pe",
    "tak", "aur", "ya", "lekin", "agar", "to", "phir", "fir", "kyun", "kyon", "kab", "kon",
    "kaun", "kitna", "kitni", "kitne",
}

HINDI_RATIO_THRESHOLD = 0.2

SPOKEN_EMOJI = re.compile("📊|📌|🎓|⏰|📞")


def add_pronunciation_correction(original: str, corrected: str) -> None:
    pronunciation_corrections[original.lower()] = corrected


def get_pronunciation_corrections() -> Dict[str, str]:
    return dict(pronunciation_corrections)


class SpeechPreprocessor:
    """Prepares reply text for the TTS providers."""

    def __init__(self, max_chars: int = Config.TTS_MAX_CHARS):
        self.max_chars = max_chars

    def clean_text(self, text: str) -> str:
        """
        Strip markdown and table syntax that would be read out literally.

        Args:
            text: Reply text, possibly markdown

        Returns:
            Plain text with whitespace collapsed
        """
        text = re.sub(r"\|", " ", text)
        text = re.sub(r"---+", " ", text)
        text = re.sub(r"#{1,6}\s+", "", text)
        text = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
        text = re.sub(r"\*(.*?)\*", r"\1", text)
        text = re.sub(r"`(.*?)`", r"\1", text)
        text = re.sub(r"\[(.*?)\]\(.*?\)", r"\1", text)
        text = SPOKEN_EMOJI.sub("", text)
        return re.sub(r"\s+", " ", text).strip()

    def apply_pronunciation_corrections(self, text: str) -> str:
        """Replace whole words, case-insensitively, using the corrections table."""
        for original, corrected in pronunciation_corrections.items():
            pattern = re.compile(rf"\b{re.escape(original)}\b", re.IGNORECASE)
            text = pattern.sub(lambda _m, c=corrected: c, text)
        return text

    def detect_language(self, text: str) -> str:
        """Return 'hi' when more than a fifth of the words are romanized Hindi, else 'en'."""
        words = re.findall(r"[a-z]+", text.lower())
        if not words:
            return "en"
        hindi_count = sum(1 for w in words if w in HINDI_WORDS)
        return "hi" if hindi_count / len(words) > HINDI_RATIO_THRESHOLD else "en"

    def prepare(self, text: str) -> Tuple[str, str, bool]:
        """
        Clean, correct and truncate `text`, then detect its language.

        Returns:
            (speech_text, language, corrections_applied)
        """
        cleaned = self.clean_text(text)
        corrected = self.apply_pronunciation_corrections(cleaned)
        limited = corrected[:self.max_chars]
        return limited, self.detect_language(limited), corrected != cleaned
