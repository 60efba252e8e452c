#!/usr/bin/env python3
"""
Main FastAPI application for the RKSD College assistant.
"""

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from typing import List, Optional
import os
import time

from .config import Config
from .controller import ChatController
from .tts import AllProvidersFailedError, EmptyTextError, SpeechSynthesizer
from ..data.storage import Storage, StorageError, get_storage
from ..schemas.io_models import AskRequest, AskResponse, ErrorResponse, HealthResponse, TTSRequest
from ..schemas.storage_models import ChatMessage, CollegeInfo
from ..utils.logger import get_logger

logger = get_logger("api")

# Track server start time for uptime measurement
SERVER_START_TIME = time.time()
MAX_LOG_LINE = 120

TTS_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Empty text"},
    503: {"model": ErrorResponse, "description": "No TTS provider produced audio"},
    500: {"model": ErrorResponse, "description": "Unexpected error"},
}

# Initialize FastAPI app
app = FastAPI(
    title="RKSD College Assistant API",
    description="Bilingual chat and voice assistant for RKSD College",
    version="1.0.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.ALLOWED_ORIGINS,
    allow_origin_regex=".*" if Config.is_development() else Config.ALLOWED_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    expose_headers=["X-TTS-Provider"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = int((time.perf_counter() - start) * 1000)
        line = f"{request.method} {request.url.path} {response.status_code} in {duration_ms}ms"
        if len(line) > MAX_LOG_LINE:
            line = line[:MAX_LOG_LINE - 1] + "…"
        logger.info(line)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Error: %s", exc)
    return JSONResponse(status_code=500, content={"message": "Internal Server Error"})


# Components are built on first use so tests can override them
_controller: Optional[ChatController] = None
_synthesizer: Optional[SpeechSynthesizer] = None


def get_controller(storage: Storage = Depends(get_storage)) -> ChatController:
    global _controller
    if _controller is None or _controller.storage is not storage:
        _controller = ChatController(storage)
    return _controller


def get_synthesizer() -> SpeechSynthesizer:
    global _synthesizer
    if _synthesizer is None:
        _synthesizer = SpeechSynthesizer()
    return _synthesizer


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint with uptime."""
    uptime_seconds = int(time.time() - SERVER_START_TIME)
    logger.info("Health ping - server uptime: %ds", uptime_seconds)
    return HealthResponse(status="ok", uptime_seconds=uptime_seconds)


@app.get("/api/messages", response_model=List[ChatMessage], responses={500: {"model": ErrorResponse}})
def list_messages(storage: Storage = Depends(get_storage)):
    """Return the most recent chat messages, oldest first."""
    try:
        return storage.get_chat_messages()
    except StorageError as e:
        logger.error("Error fetching messages: %s", e)
        return JSONResponse(status_code=500, content={"message": "Failed to fetch messages"})


@app.post("/api/ask", response_model=AskResponse, responses={500: {"model": ErrorResponse}})
def ask(request: AskRequest, controller: ChatController = Depends(get_controller)):
    """
    Answer a question about the college.

    Args:
        request: The user's message and optional language tag

    Returns:
        The assistant's reply and the stored message id
    """
    try:
        reply = controller.handle_ask(request.message, request.language)
    except StorageError as e:
        logger.error("Fallback also failed: %s", e)
        return JSONResponse(
            status_code=500,
            content={"message": "Service temporarily unavailable. Please try again later."}
        )
    return AskResponse(response=reply.content, message_id=reply.id)


@app.post("/api/tts", responses=TTS_ERROR_RESPONSES)
def text_to_speech(request: TTSRequest, synthesizer: SpeechSynthesizer = Depends(get_synthesizer)):
    """
    Synthesize speech, falling back from Cartesia to ElevenLabs.

    A 503 tells the widget to use the browser's speech engine instead.
    """
    try:
        result = synthesizer.synthesize(request)
    except EmptyTextError:
        return JSONResponse(status_code=400, content={"message": "Text cannot be empty", "error": "EMPTY_TEXT"})
    except AllProvidersFailedError as e:
        return JSONResponse(status_code=503, content={"message": str(e), "error": "ALL_TTS_PROVIDERS_FAILED"})
    except Exception as e:
        logger.exception("Error in TTS endpoint")
        return JSONResponse(status_code=500, content={
            "message": "Internal server error during speech generation",
            "error": "SERVER_ERROR",
            "details": str(e),
        })

    return Response(
        content=result.audio,
        media_type=result.content_type,
        headers={"X-TTS-Provider": result.provider},
    )


@app.get("/api/college-info", response_model=List[CollegeInfo], responses={500: {"model": ErrorResponse}})
def college_info(category: Optional[str] = None, search: Optional[str] = None,
                 storage: Storage = Depends(get_storage)):
    """List college facts; `search` wins over `category` when both are given."""
    try:
        if search:
            return storage.search_college_info(search)
        if category:
            return storage.get_college_info_by_category(category)
        return storage.get_college_info()
    except StorageError as e:
        logger.error("Error fetching college info: %s", e)
        return JSONResponse(status_code=500, content={"message": "Failed to fetch college information"})


# Serve the built widget if it is present
static_files_path = Config.STATIC_DIR
if os.path.exists(static_files_path):
    app.mount("/", StaticFiles(directory=static_files_path, html=True), name="static")

if __name__ == "__main__":
    import uvicorn
    Config.debug_print()
    logger.info("Server running on port %d", Config.PORT)
    uvicorn.run(app, host=Config.HOST, port=Config.PORT)
