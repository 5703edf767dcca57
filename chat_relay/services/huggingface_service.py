"""
HUGGINGFACE SERVICE MODULE
==========================

The inference client: turns one user message into one generated reply by
calling the HuggingFace Inference API for MODEL_ID.

FLOW (get_reply):
  1. make_request(text) does exactly one POST to <api>/models/<model-id>.
  2. On a retryable InferenceError (model loading, timeout, empty result) we wait
     1s, 2s, 4s, 8s between attempts, up to MAX_RETRIES attempts in total.
  3. Any other InferenceError is raised at once; if every attempt was retryable
     we raise MAX_RETRIES_EXCEEDED instead of the last attempt's error.

RESPONSE SHAPES (parse_response):
  - Conversational: {"conversation": {"generated_responses": [...]}, "generated_text": "..."}
  - Text generation: [{"generated_text": "..."}]
  The conversational shape is tried first; if it does not decode or has no text,
  the list shape is tried. An empty list (or null) is retryable; a list whose
  first item is null or has an empty generated_text is a valid (blank) reply.

No state is kept between calls, so one instance is shared by all requests.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from chat_relay.models import (
    ConversationalResponse,
    GeneratedSequenceList,
    InferenceRequest,
)
from chat_relay.services.errors import ErrorKind, InferenceError
from chat_relay.utils.retry import RetriesExhausted, with_retry
from config import (
    GENERATION_PARAMETERS,
    HUGGINGFACE_API_KEY,
    HUGGINGFACE_API_URL,
    INITIAL_RETRY_DELAY_SECONDS,
    MAX_RETRIES,
    MODEL_ID,
    REQUEST_TIMEOUT_SECONDS,
)

logger = logging.getLogger("chat-relay")


# ==============================================================================
# HUGGINGFACE SERVICE CLASS
# ==============================================================================

class HuggingFaceService:
    """
    Calls a hosted HuggingFace model and normalizes its answer to a plain string.
    Configuration is fixed at construction; the API key is only checked when a
    request is made, so the server can start without it.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_id: Optional[str] = None,
        api_url: str = HUGGINGFACE_API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        max_retries: int = MAX_RETRIES,
        initial_delay: float = INITIAL_RETRY_DELAY_SECONDS,
        parameters: Optional[Dict[str, Any]] = None,
    ):
        self.api_key = HUGGINGFACE_API_KEY if api_key is None else api_key
        self.model_id = model_id or MODEL_ID
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.parameters = dict(GENERATION_PARAMETERS if parameters is None else parameters)

    @property
    def endpoint(self) -> str:
        return f"{self.api_url}/{self.model_id}"

    # --------------------------------------------------------------------------
    # PUBLIC API
    # --------------------------------------------------------------------------

    def get_reply(self, text: str) -> str:
        """
        Return the model's reply to text, retrying transient failures.

        Raises:
            InferenceError: the terminal error of the call. Either the first
                non-retryable error, or MAX_RETRIES_EXCEEDED.
        """
        try:
            return with_retry(
                lambda: self.make_request(text),
                max_retries=self.max_retries,
                initial_delay=self.initial_delay,
                is_retryable=lambda e: isinstance(e, InferenceError) and e.retryable,
            )
        except RetriesExhausted as e:
            raise InferenceError(
                ErrorKind.MAX_RETRIES_EXCEEDED,
                f"max retries exceeded after {e.attempts} attempts, "
                "model may be temporarily unavailable",
            ) from e.last_exception

    def build_request(self, text: str) -> InferenceRequest:
        """The request body for text: inputs plus a copy of the generation parameters."""
        return InferenceRequest(inputs=text, parameters=dict(self.parameters))

    def make_request(self, text: str) -> str:
        """
        One round trip to the model. Returns the reply or raises InferenceError.

        The empty string is sent as-is; the model decides what to do with it.
        """
        if not self.api_key:
            raise InferenceError(
                ErrorKind.CONFIG, "HUGGINGFACE_API_KEY environment variable not set"
            )

        logger.info("Making request to model: %s", self.model_id)
        body = self.build_request(text)
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            # requests reads the whole body before returning.
            resp = requests.post(
                self.endpoint,
                data=body.model_dump_json(),
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise InferenceError.timeout() from e
        except requests.RequestException as e:
            raise InferenceError(ErrorKind.NETWORK, f"error making request: {e}") from e

        # Decode the raw bytes as UTF-8 regardless of the charset requests would guess.
        return self.parse_response(
            resp.status_code, resp.content.decode("utf-8", errors="replace")
        )

    # --------------------------------------------------------------------------
    # RESPONSE PARSING
    # --------------------------------------------------------------------------

    def parse_response(self, status_code: int, body: str) -> str:
        """Map an HTTP status and raw body to a reply string or an InferenceError."""
        if status_code == 503:
            # Model still loading; the body is not inspected.
            raise InferenceError.model_loading()

        if not 200 <= status_code < 300:
            raise _api_error(status_code, body)

        logger.debug("Raw response: %s", body)

        try:
            data = json.loads(body)
        except ValueError as e:
            raise InferenceError(
                ErrorKind.DECODE,
                f"error unmarshaling response: {e}, raw response: {body}",
            ) from e

        # Conversational shape first; a decode failure here is not an error.
        if isinstance(data, dict):
            try:
                reply = ConversationalResponse.model_validate(data).first_reply()
            except ValidationError:
                reply = ""
            if reply:
                return reply

        # A bare null decodes as an empty list.
        if data is None:
            data = []

        try:
            sequences = GeneratedSequenceList.validate_python(data)
        except ValidationError as e:
            raise InferenceError(
                ErrorKind.DECODE,
                f"error unmarshaling response: {e.error_count()} validation error(s), "
                f"raw response: {body}",
            ) from e

        if not sequences:
            raise InferenceError.empty_result()

        first = sequences[0]
        return (first.generated_text if first else None) or ""


def _api_error(status_code: int, body: str) -> InferenceError:
    """Error for a non-2xx status: the {"error": ...} value if present, else status + body."""
    try:
        envelope = json.loads(body)
    except ValueError:
        envelope = None

    if isinstance(envelope, dict) and envelope.get("error") is not None:
        detail = envelope["error"]
        if not isinstance(detail, str):
            detail = json.dumps(detail)
        return InferenceError(ErrorKind.APPLICATION, f"API error: {detail}")

    return InferenceError(
        ErrorKind.APPLICATION, f"API error (status {status_code}): {body}"
    )
