"""Canned replies used when the LLM cannot answer."""
import re
from typing import List

GREETING = ["hello", "hi", "hlo"]

TECHNICAL_DIFFICULTIES_REPLY = (
    "I'm experiencing some technical difficulties, but I'm here to help! "
    "Please try asking your question again, or contact RKSD College directly for urgent inquiries."
)


def _has_word(tokens: List[str], vocab: List[str]) -> bool:
    return any(t in vocab for t in tokens)


def fallback_reply(message: str) -> str:
    """Pick a keyword-matched reply for `message`."""
    ql = message.lower()
    tokens = re.findall(r"[a-z]+", ql)
    if _has_word(tokens, GREETING):
        return "Hello! I'm your RKSD Assistant. How can I help you with college information today?"
    if "hostel" in ql:
        return ("For hostel-related queries, please contact the hostel office during working hours. "
                "I can help you with general college information.")
    if "admission" in ql:
        return ("For admission inquiries, please visit the RKSD College admission office "
                "or check our official website for the latest information.")
    return (f'Thank you for your question about "{message}". I\'m here to help with RKSD College information. '
            "Could you please be more specific about what you'd like to know?")
