"""TurnLog: append-only, ordered record of conversation turns.

The only operations are append, read and a full reset. Turns are frozen
pydantic models, so nothing handed out by `all()` can be edited in place.
"""

from typing import List, Optional, Tuple

from ..models.session_models import Turn, TurnKind, TurnRole


class TurnLog:
    """Ordered turns with strictly increasing `sequence` numbers (from 1)."""

    def __init__(self) -> None:
        self._turns: List[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    @property
    def next_sequence(self) -> int:
        return self._turns[-1].sequence + 1 if self._turns else 1

    def append(self, turn: Turn) -> Turn:
        """Append an already-built turn.

        Raises ValueError if its sequence does not follow the last one.
        """
        if self._turns and turn.sequence <= self._turns[-1].sequence:
            raise ValueError(
                f"Turn sequence {turn.sequence} does not follow "
                f"{self._turns[-1].sequence}"
            )
        self._turns.append(turn)
        return turn

    def record(
        self, role: TurnRole, content: str, kind: Optional[TurnKind] = None
    ) -> Turn:
        """Build a turn with the next sequence number and append it."""
        turn = Turn(role=role, content=content, sequence=self.next_sequence, kind=kind)
        return self.append(turn)

    def all(self) -> Tuple[Turn, ...]:
        return tuple(self._turns)

    def last(self) -> Optional[Turn]:
        return self._turns[-1] if self._turns else None

    def reset(self) -> None:
        self._turns = []
