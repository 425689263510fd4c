"""Mutable per-engine state: selection and drag bookkeeping."""

from dataclasses import dataclass
from typing import Optional

from ..config import DropLocation, ItemId


@dataclass
class EngineState:
    """State owned by one engine instance.

    Ephemeral open flags live in the EphemeralStore, not here, so that
    the open-state policy is decided in exactly one place.
    """

    selected_id: Optional[ItemId] = None
    drag_source_id: Optional[ItemId] = None
    drop_target_id: Optional[ItemId] = None       # Target under the pointer
    drop_location: Optional[DropLocation] = None  # Transient drop affordance

    @property
    def is_dragging(self) -> bool:
        return self.drag_source_id is not None

    def clear_drop_affordance(self) -> None:
        self.drop_target_id = None
        self.drop_location = None

    def end_drag(self) -> None:
        self.drag_source_id = None
        self.clear_drop_affordance()

    def reset(self) -> None:
        """Return to the freshly constructed state."""
        self.selected_id = None
        self.end_drag()
