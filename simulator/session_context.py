from dataclasses import dataclass, field, fields
from typing import List, Optional

from simulator.allocation_engine import AllocationLineItem
from simulator.enums import ConversationState
from simulator.preferences import Preferences


@dataclass
class SessionContext:
    """
    Holds all state gathered during a single questionnaire session.
    Tracks the conversation stage, the preferences collected so far, and
    the last computed allocation.
    """
    state: ConversationState = ConversationState.GREETING

    # Starts at the defaults; every answer replaces one field.
    preferences: Preferences = field(default_factory=Preferences)

    # Last allocation computed from ``preferences``
    rows: Optional[List[AllocationLineItem]] = None

    def update(self, **changes) -> Preferences:
        """
        Replace one or more preference fields, clamping numeric values into
        range, and return the new record.
        """
        values = {f.name: getattr(self.preferences, f.name) for f in fields(Preferences)}
        values.update(changes)
        self.preferences = Preferences.clamped(**values)
        return self.preferences

    def is_complete(self) -> bool:
        """Return True when the conversation has fully finished."""
        return self.state == ConversationState.DONE

    def reset(self):
        """Reset the session to its initial state."""
        self.__init__()
