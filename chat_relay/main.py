"""
CHAT RELAY MAIN API
===================

This module defines the FastAPI application and its endpoints. The server
does not generate text itself: every message is handed to HuggingFaceService,
which calls the hosted model (with retries) and returns the reply.

ENDPOINTS:
  GET  /          - Returns API name and list of endpoints.
  GET  /health    - Returns whether the inference service is ready.
  POST /api/chat  - Body {"role": "...", "content": "..."}; returns {"message": "<reply>"}.
                    400 (plain text) if the body is not valid JSON of that shape,
                    500 (plain text) if the model could not produce a reply.
  WS   /ws        - Each incoming frame is one message; the reply is sent back in a
                    frame of the same type (text or binary). If the model fails, the
                    text "Error getting model response" is sent and the socket stays open.

NO SESSIONS:
  Every message is independent: no history is stored or sent to the model.

CONCURRENCY:
  get_reply() blocks (HTTP call + backoff sleeps), so it runs in the threadpool
  via run_in_threadpool. Messages on one WebSocket are handled one at a time.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
import uvicorn

from chat_relay.models import ChatMessage, ChatResponse
from chat_relay.services.errors import InferenceError
from chat_relay.services.huggingface_service import HuggingFaceService
from config import ALLOWED_ORIGINS, PORT

# Sent to the client (HTTP 500 body / WebSocket frame) whenever the model call fails.
# The underlying error is only logged.
MODEL_ERROR_MESSAGE = "Error getting model response"


# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("chat-relay")


# -----------------------------------------------------------------------------
# GLOBAL SERVICE REFERENCE
# -----------------------------------------------------------------------------
# Set during startup (lifespan) and used by all route handlers. The service is
# stateless, so one instance serves every request and connection.
inference_service: HuggingFaceService = None


# -------------------------------------------------------------------------
# LIFESPAN (STARTUP / SHUTDOWN)
# -------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the HuggingFaceService once at startup.

    A missing HUGGINGFACE_API_KEY does not stop the server: it is logged here,
    and each chat message fails with a configuration error until it is set.
    """
    global inference_service

    logger.info("=" * 60)
    logger.info("Chat relay - Starting Up...")
    logger.info("=" * 60)

    inference_service = HuggingFaceService()
    logger.info("Inference service ready (model: %s)", inference_service.model_id)
    if not inference_service.api_key:
        logger.warning("HUGGINGFACE_API_KEY not set. Chat requests will fail until it is configured.")
    logger.info("Allowed origins: %s", ", ".join(ALLOWED_ORIGINS))
    logger.info("Server starting on port %s", PORT)

    yield

    logger.info("Chat relay shutting down...")


# -------------------------------------------------------------------------
# FASTAPI APP AND CORS
# -------------------------------------------------------------------------
app = FastAPI(
    title="Chat Relay API",
    description="Relays chat messages to a hosted HuggingFace model",
    lifespan=lifespan
)

# Only the configured frontends may call the API from a browser (cookies allowed).
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


# =========================================================================
# API ENDPOINTS
# =========================================================================

@app.get("/")
async def root():
    """Return the API name and a short description of each endpoint (for discovery)."""
    return {
        "message": "Chat Relay API",
        "endpoints": {
            "/api/chat": "POST a message, get the model's reply",
            "/ws": "WebSocket chat (one reply per message)",
            "/health": "Service health check"
        }
    }


@app.get("/health")
async def health():
    """Return 'healthy' plus whether the inference service exists and has an API key."""
    return {
        "status": "healthy",
        "inference_service": inference_service is not None,
        "api_key_configured": bool(inference_service and inference_service.api_key),
        "model": inference_service.model_id if inference_service else None,
    }


@app.post("/api/chat", response_model=ChatResponse)
async def chat(request: Request):
    """
    Send one message to the model and return its reply.

    REQUEST BODY:
    {
        "role": "user",
        "content": "Hello!"
    }

    RESPONSE:
    {
        "message": "Hi there, how are you?"
    }

    The body is decoded by hand (not as a FastAPI body parameter) so malformed
    JSON answers 400 with plain text instead of FastAPI's 422.
    """
    if not inference_service:
        raise HTTPException(status_code=503, detail="Inference service not initialized")

    raw = await request.body()
    try:
        # A JSON null body is an empty message, like an object with no fields.
        if raw.strip() == b"null":
            message = ChatMessage()
        else:
            message = ChatMessage.model_validate_json(raw)
    except ValidationError as e:
        return PlainTextResponse(str(e), status_code=400)

    try:
        reply = await run_in_threadpool(inference_service.get_reply, message.content)
    except InferenceError as e:
        logger.error("Error getting model response: %s", e)
        return PlainTextResponse(MODEL_ERROR_MESSAGE, status_code=500)

    return ChatResponse(message=reply)


@app.websocket("/ws")
async def chat_websocket(websocket: WebSocket):
    """
    Full-duplex chat: read a frame, send the reply, repeat.

    Two kinds of failure:
    - The model call fails (InferenceError): send MODEL_ERROR_MESSAGE and keep reading.
    - The connection fails (client disconnect, send/receive error): stop and close.
    """
    await websocket.accept()

    if not inference_service:
        logger.error("WebSocket opened before inference service was initialized")
        await websocket.close(code=1011)
        return

    try:
        while True:
            frame = await websocket.receive()
            if frame["type"] == "websocket.disconnect":
                logger.info("WebSocket client disconnected")
                return

            is_binary = frame.get("text") is None
            if is_binary:
                text = (frame.get("bytes") or b"").decode("utf-8", errors="replace")
            else:
                text = frame["text"]

            try:
                reply = await run_in_threadpool(inference_service.get_reply, text)
            except InferenceError as e:
                logger.error("Error getting model response: %s", e)
                reply = MODEL_ERROR_MESSAGE

            if is_binary:
                await websocket.send_bytes(reply.encode("utf-8"))
            else:
                await websocket.send_text(reply)
    except WebSocketDisconnect:
        logger.info("WebSocket client disconnected")
    except RuntimeError as e:
        # Starlette raises RuntimeError for send/receive on a closed socket.
        logger.info("WebSocket connection closed: %s", e)


# -------------------------------------------------------------------------
# STANDALONE RUN (python -m chat_relay.main)
# -------------------------------------------------------------------------
def run():
    """Start the uvicorn server (same as run.py); used if someone does python -m chat_relay.main"""
    uvicorn.run(
        "chat_relay.main:app",
        host="0.0.0.0",
        port=PORT,
        log_level="info"
    )

if __name__ == "__main__":
    run()
