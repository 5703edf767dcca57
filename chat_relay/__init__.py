"""
CHAT RELAY APPLICATION PACKAGE
==============================

Relays chat messages from a frontend (HTTP or WebSocket) to a hosted
HuggingFace text-generation model and sends the generated reply back.

FILE STRUCTURE:
  chat_relay/
    __init__.py   - This file; marks 'chat_relay' as a package.
    main.py       - FastAPI app: POST /api/chat, WS /ws, /health.
    models.py     - Pydantic models for the chat API and the HuggingFace payloads.
    services/     - The inference client (request, retry, response parsing) and its errors.
    utils/        - Helpers: retry with exponential backoff.
"""
