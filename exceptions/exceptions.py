"""
Custom exceptions for DocChat.

These exceptions are intentionally simple and descriptive.
They are used across:

  - core/api/          (backend envelope errors)
  - core/extraction/   (OCR backend failures)
  - runtime/           (chat transports, session state)

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules.
"""


class ApiEnvelopeError(Exception):
    """
    Raised when a backend call does not produce a successful
    `{success: true, data: ...}` envelope.

    Covers `success: false` bodies, non-2xx statuses and bodies that are
    not JSON at all.
    """

    def __init__(self, code, message, status_code=None):
        self.code = code
        self.message = message
        self.status_code = status_code
        msg = f"[{code}] {message}"
        if status_code is not None:
            msg += f" (HTTP {status_code})"
        super().__init__(msg)


class ExtractionServiceError(Exception):
    """
    Raised by an OCR backend when the extraction call itself fails
    (network error, timeout, error envelope).

    A successful call that returns too little text is NOT this error;
    the ExtractionGate turns that into an INSUFFICIENT_CONTENT rejection.
    """

    def __init__(self, details):
        self.details = details
        super().__init__(f"Text extraction failed: {details}")


class ChatTransportError(Exception):
    """
    Raised by a ChatTransport when no usable answer could be obtained.

    `kind` is one of "network", "timeout", "malformed" or "rejected". It is
    informational only: the ConversationController handles every kind the
    same way (an apology turn).
    """

    def __init__(self, kind, details=None):
        self.kind = kind
        self.details = details or "Chat service did not return an answer."
        super().__init__(f"Chat transport error ({kind}): {self.details}")


class ContextAlreadySetError(Exception):
    """
    Raised when a ContextStore that already holds a document context is
    asked to store another one. A new document requires a session reset.
    """

    def __init__(self, existing_label, new_label):
        self.existing_label = existing_label
        self.new_label = new_label
        msg = (
            f"Context for '{existing_label}' is already set; "
            f"cannot replace it with '{new_label}' without a reset."
        )
        super().__init__(msg)
