"""Per-identity conversation state."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Session:
    """
    Mutable state of one user's conversation with one vertical.

    Lives in the SessionStore keyed by ``identity`` and is only mutated by
    ``DialogueEngine.step``. Collected fields hold the user's text verbatim.
    """
    identity: str
    stage: str
    fields: dict[str, str] = field(default_factory=dict)
    flow_tag: Optional[str] = None
    turns: int = 0

    def rewind(self, stage: str, clear_fields: bool) -> None:
        """Return to ``stage``, optionally forgetting everything collected."""
        self.stage = stage
        if clear_fields:
            self.fields.clear()
            self.flow_tag = None
