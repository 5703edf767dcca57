"""
DATA MODELS MODULE
==================

This file defines the Pydantic models used for the chat API and for the
HuggingFace Inference API payloads. FastAPI uses the chat models to decode
incoming JSON and serialize replies; the inference client uses the others to
build requests and to decode the two response shapes the API can return.

MODELS:
  ChatMessage            - Body of POST /api/chat (role + content; role is not used).
  ChatResponse           - Body returned by POST /api/chat.
  InferenceRequest       - Body sent to the model (inputs + generation parameters). Immutable.
  ConversationalResponse - Conversational models (BlenderBot): generated_text and/or conversation.
  GeneratedSequence      - One item of the list returned by text-generation models.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# ==============================================================================
# CHAT API MODELS
# ==============================================================================

class ChatMessage(BaseModel):
    """
    Request body for POST /api/chat.

    Both fields are optional and default to "" so a body like {"content": "hi"}
    is accepted. Non-string values are rejected (400).
    """
    role: str = ""      # "user" from the frontend; accepted but ignored.
    content: str = ""   # The message text sent to the model (may be empty).


class ChatResponse(BaseModel):
    """Response body for POST /api/chat: the model's reply text."""
    message: str

# ==============================================================================
# HUGGINGFACE INFERENCE API MODELS
# ==============================================================================

class InferenceRequest(BaseModel):
    """
    JSON body POSTed to https://<api>/models/<model-id>.
    Built fresh for every attempt and frozen so it can't be changed after.
    """
    model_config = ConfigDict(frozen=True)

    inputs: str
    parameters: Dict[str, Any] = Field(default_factory=dict)


class Conversation(BaseModel):
    generated_responses: List[str] = Field(default_factory=list)
    past_user_inputs: List[str] = Field(default_factory=list)


class ConversationalResponse(BaseModel):
    """
    Shape returned by conversational models:
      {"generated_text": "...", "conversation": {"generated_responses": [...], ...}}
    Every field is optional (null counts as missing); unknown fields are ignored.
    """
    generated_text: Optional[str] = None
    conversation: Optional[Conversation] = None

    def first_reply(self) -> str:
        """First generated response, else generated_text, else "" (nothing usable)."""
        if self.conversation and self.conversation.generated_responses:
            return self.conversation.generated_responses[0]
        return self.generated_text or ""


class GeneratedSequence(BaseModel):
    """One element of the list shape: [{"generated_text": "..."}]."""
    generated_text: Optional[str] = None


# Decoder for the list shape (reused across requests). A null element is kept
# as None and read as an empty generated_text.
GeneratedSequenceList = TypeAdapter(List[Optional[GeneratedSequence]])
