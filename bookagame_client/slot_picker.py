"""
Consecutive time-slot selection.

A booking covers a run of back-to-back one-hour slots on one court and one
date. ``SlotPicker`` turns individual taps on the slot list into such a run:

- taps on booked or blocked slots are ignored;
- tapping a selected slot deselects it; if that splits the run, only the
  leading run (starting at the earliest remaining slot) is kept;
- tapping a free slot extends the run when it is adjacent to it, or starts a
  new run with just that slot when it is not;
- once ``max_slots`` slots are selected, further new slots are ignored.

Adjacency is by position in the sorted slot list, so a booked slot between
two free ones breaks a run.
"""

import logging
from typing import Callable, Dict, List, Optional

from bookagame_client import config
from bookagame_client.models import SlotRange, TimeSlot

logger = logging.getLogger(__name__)

RangeListener = Callable[[Optional[SlotRange]], None]


def is_contiguous(indices: List[int]) -> bool:
    """True when the sorted indices have no gaps. An empty list counts as contiguous."""
    ordered = sorted(indices)
    return all(b - a == 1 for a, b in zip(ordered, ordered[1:]))


def leading_run(indices: List[int]) -> List[int]:
    """Returns the gap-free run that starts at the smallest index."""
    ordered = sorted(indices)
    run = ordered[:1]
    for index in ordered[1:]:
        if index - run[-1] != 1:
            break
        run.append(index)
    return run


class SlotPicker:
    """Selection state for one (court, date) slot list."""

    def __init__(
        self,
        max_slots: int = config.MAX_SLOTS,
        min_slots: int = config.MIN_SLOTS,
        on_change: Optional[RangeListener] = None,
    ):
        if max_slots < 1:
            raise ValueError(f"max_slots must be at least 1, got {max_slots}")
        self.max_slots = max_slots
        self.min_slots = min_slots
        self.on_change = on_change
        self.slots: List[TimeSlot] = []
        self._index: Dict[str, int] = {}
        self._selected: List[int] = []

    # --- Loading ---

    def load(self, slots: List[TimeSlot]):
        """Installs a fresh slot snapshot and clears the selection."""
        self.slots = sorted(slots, key=lambda s: s.start_time)
        self._index = {slot.start_time: i for i, slot in enumerate(self.slots)}
        if len(self._index) != len(self.slots):
            logger.warning("Slot list contains duplicate start times; later entries win.")
        self.reset()

    def load_for(self, client, court_id: str, date: str):
        """Fetches the slots of ``court_id`` on ``date`` and loads them."""
        logger.info(f"Loading slots for court {court_id} on {date}")
        self.load(client.get_court_slots(court_id, date))

    def reset(self):
        had_selection = bool(self._selected)
        self._selected = []
        if had_selection:
            self._notify()

    # --- Queries ---

    @property
    def selection(self) -> List[str]:
        """Selected start times, ascending."""
        return [self.slots[i].start_time for i in self._selected]

    @property
    def selected_range(self) -> Optional[SlotRange]:
        if not self._selected:
            return None
        first = self.slots[self._selected[0]]
        last = self.slots[self._selected[-1]]
        return SlotRange(start_time=first.start_time, end_time=last.end_time or last.start_time)

    @property
    def hours_selected(self) -> int:
        return len(self._selected)

    @property
    def available_count(self) -> int:
        return sum(1 for slot in self.slots if slot.is_available)

    @property
    def is_complete(self) -> bool:
        return len(self._selected) >= max(self.min_slots, 1)

    def is_selected(self, start_time: str) -> bool:
        index = self._index.get(start_time)
        return index is not None and index in self._selected

    # --- Taps ---

    def tap(self, start_time: str) -> Optional[SlotRange]:
        """Applies one tap and returns the resulting range (None when empty)."""
        index = self._index.get(start_time)
        if index is None:
            logger.warning(f"Ignoring tap on unknown slot {start_time}")
            return self.selected_range

        slot = self.slots[index]
        if slot.status in ("booked", "blocked"):
            logger.debug(f"Ignoring tap on {slot.status} slot {start_time}")
            return self.selected_range

        if index in self._selected:
            remaining = [i for i in self._selected if i != index]
            self._set(leading_run(remaining))
        elif len(self._selected) >= self.max_slots:
            logger.debug(f"Maximum of {self.max_slots} slots reached; ignoring {start_time}")
        elif is_contiguous(self._selected + [index]):
            self._set(self._selected + [index])
        else:
            self._set([index])
        return self.selected_range

    def tap_all(self, start_times: List[str]) -> Optional[SlotRange]:
        for start_time in start_times:
            self.tap(start_time)
        return self.selected_range

    def _set(self, indices: List[int]):
        indices = sorted(indices)
        if indices == self._selected:
            return
        self._selected = indices
        self._notify()

    def _notify(self):
        if self.on_change is not None:
            self.on_change(self.selected_range)
