"""ContextStore: the single grounding text for one conversation.

Set at most once; only `clear()` (used by a session reset) empties it.
"""

from typing import Optional

from core.extraction.models import ExtractedContext
from exceptions.exceptions import ContextAlreadySetError


class ContextStore:
    def __init__(self) -> None:
        self._context: Optional[ExtractedContext] = None

    @property
    def is_set(self) -> bool:
        return self._context is not None

    def set(self, context: ExtractedContext) -> None:
        if self._context is not None:
            raise ContextAlreadySetError(
                self._context.document_label, context.document_label
            )
        self._context = context

    def get(self) -> Optional[ExtractedContext]:
        return self._context

    def clear(self) -> None:
        self._context = None
