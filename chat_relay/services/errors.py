"""
INFERENCE ERRORS
================

Every failure of the inference client is raised as an InferenceError tagged
with an ErrorKind. Whether a failure is retried depends only on the kind,
never on the message text:

  Retryable (transient, model side):
    REMOTE_UNAVAILABLE - 503 while the model is loading
    TIMEOUT            - the request hit REQUEST_TIMEOUT_SECONDS
    EMPTY_RESULT       - the model answered with an empty list

  Terminal (raised on the first occurrence):
    CONFIG, APPLICATION, NETWORK, DECODE, MAX_RETRIES_EXCEEDED
"""

from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    TIMEOUT = "timeout"
    EMPTY_RESULT = "empty_result"
    APPLICATION = "application"
    NETWORK = "network"
    DECODE = "decode"
    MAX_RETRIES_EXCEEDED = "max_retries_exceeded"


RETRYABLE_KINDS = frozenset({
    ErrorKind.REMOTE_UNAVAILABLE,
    ErrorKind.TIMEOUT,
    ErrorKind.EMPTY_RESULT,
})

# Messages for the retryable kinds are fixed so log lines stay greppable.
MODEL_LOADING_MESSAGE = "service unavailable (503): model is loading"
TIMEOUT_MESSAGE = "error making request: context deadline exceeded"
EMPTY_RESULT_MESSAGE = "empty response from model"


class InferenceError(Exception):
    """A failed call to the inference endpoint. str(error) is the message."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    def __repr__(self) -> str:
        return f"InferenceError({self.kind.value}, {self.message!r})"

    # Constructors for the fixed-message kinds.

    @classmethod
    def model_loading(cls) -> "InferenceError":
        return cls(ErrorKind.REMOTE_UNAVAILABLE, MODEL_LOADING_MESSAGE)

    @classmethod
    def timeout(cls) -> "InferenceError":
        return cls(ErrorKind.TIMEOUT, TIMEOUT_MESSAGE)

    @classmethod
    def empty_result(cls) -> "InferenceError":
        return cls(ErrorKind.EMPTY_RESULT, EMPTY_RESULT_MESSAGE)
