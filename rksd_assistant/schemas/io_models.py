"""Pydantic models for API I/O.

Field names follow the JSON the chat widget already sends (camelCase), so the
TTS request uses aliases rather than renaming the client payload.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Optional, Union

SpeedPreset = Literal["slowest", "slow", "normal", "fast", "fastest"]
CartesiaLanguage = Literal["en", "fr", "de", "es", "pt", "zh", "ja", "hi", "it", "ko", "nl", "pl", "ru", "sv", "tr"]

class AskRequest(BaseModel):
    message: str = Field(min_length=1)
    language: Optional[str] = None

class AskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    message_id: str = Field(alias="messageId")

class TTSRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    text: str = Field(min_length=1)
    voice_id: str = Field(alias="voiceId")
    # ElevenLabs parameters
    model_id: Optional[str] = Field(default=None, alias="modelId")
    stability: Optional[float] = None
    similarity_boost: Optional[float] = Field(default=None, alias="similarityBoost")
    # Cartesia parameters
    cartesia_model_id: Optional[str] = Field(default=None, alias="cartesiaModelId")
    speed: Optional[Union[SpeedPreset, Annotated[float, Field(ge=-1, le=1)]]] = None
    emotions: Optional[List[str]] = None
    language: Optional[CartesiaLanguage] = None

class ErrorResponse(BaseModel):
    message: str
    error: Optional[str] = None
    details: Optional[str] = None

class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str
    uptime_seconds: int = Field(alias="uptimeSeconds")
