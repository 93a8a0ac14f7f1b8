"""
FastAPI app exposing the chatbot over HTTP.

Endpoints:
- GET  /health  - liveness and readiness
- POST /chat    - one conversational turn
- POST /correct - teach a better reply
- GET  /stats   - statement and session statistics

Run with: uvicorn learnbot.web.app:app
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from learnbot import __version__
from learnbot.config.constants import DEFAULT_CONVERSATION
from learnbot.config.settings import Settings, get_settings
from learnbot.container import LearnbotContainer
from learnbot.conversation.chatbot import ChatBot

logger = logging.getLogger(__name__)


# --- Input Validation ---

def _require_text(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


class ChatRequest(BaseModel):
    text: str
    conversation: Optional[str] = None

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _require_text(v)


class CorrectRequest(BaseModel):
    input: str
    response: str

    @field_validator("input", "response")
    @classmethod
    def validate_fields(cls, v: str) -> str:
        return _require_text(v)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def get_chatbot(request: Request) -> ChatBot:
    return request.app.state.chatbot


# --- App Factory ---

def create_app(settings: Optional[Settings] = None, chatbot: Optional[ChatBot] = None) -> FastAPI:
    """
    Build the app.

    Settings are resolved and the chatbot built and initialized when the
    app starts, not at import time.

    Args:
        settings: Settings for the container (default: environment)
        chatbot: Prebuilt chatbot (skips the container)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings if settings is not None else get_settings()
        logging.basicConfig(
            level=logging.DEBUG if resolved.debug else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        bot = chatbot if chatbot is not None else LearnbotContainer(resolved).create_chatbot()
        app.state.chatbot = bot
        if not await bot.initialize():
            logger.error("Chatbot failed to initialize; serving starting-up replies")
        yield

    app = FastAPI(title="learnbot", version=__version__, lifespan=lifespan)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg")
        else:
            message = "Invalid request"
        return _error(400, message)

    # --- Endpoints ---

    @app.get("/health")
    async def health_check(bot: ChatBot = Depends(get_chatbot)):
        """Health check endpoint."""
        return {"status": "ok", "ready": bot.is_ready}

    @app.post("/chat")
    async def chat(chat_request: ChatRequest, bot: ChatBot = Depends(get_chatbot)):
        """One conversational turn."""
        try:
            response = await bot.get_response(
                chat_request.text,
                conversation=chat_request.conversation or DEFAULT_CONVERSATION,
            )
        except Exception:
            logger.exception("Chat request failed")
            return _error(500, "Service error")
        return {"response": {"text": response.text, "confidence": response.confidence}}

    @app.post("/correct")
    async def correct(correct_request: CorrectRequest, bot: ChatBot = Depends(get_chatbot)):
        """Teach that `response` is the right reply to `input`."""
        try:
            learned = await bot.learn_correction(correct_request.input, correct_request.response)
        except Exception:
            logger.exception("Correction request failed")
            return _error(500, "Service error")
        if learned is None:
            return _error(500, "Correction could not be stored")
        return {
            "learned": {
                "text": learned.text,
                "in_response_to": learned.in_response_to,
                "intent": learned.intent,
            }
        }

    @app.get("/stats")
    async def stats(bot: ChatBot = Depends(get_chatbot)):
        """Statement and session statistics."""
        return await bot.get_stats()

    return app


app = create_app()
