"""
SERVICES PACKAGE
=================

Business logic lives here. The API layer (chat_relay.main) calls these services;
they don't handle HTTP requests from the frontend, only the call to the model.

MODULES:
    errors              - InferenceError and ErrorKind (which failures are retried).
    huggingface_service - HuggingFaceService: one reply per user message, with retries.
"""
