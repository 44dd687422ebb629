"""Window and tab snapshots exposed by the automation host."""

from dataclasses import dataclass, field
from typing import List, Optional

FOREGROUND_INDEX = 0


@dataclass
class Tab:
    """A single browser tab."""

    target_id: str
    url: str
    title: str = ""


@dataclass
class Window:
    """A browser window: an ordered collection of tabs.

    ``index`` is the stacking position (0 is the foreground) and
    ``active_tab_index`` is 0-based into ``tabs``.
    """

    window_id: int
    tabs: List[Tab] = field(default_factory=list)
    active_tab_index: int = 0
    index: int = FOREGROUND_INDEX
    visible: bool = True

    @property
    def active_tab(self) -> Optional[Tab]:
        if 0 <= self.active_tab_index < len(self.tabs):
            return self.tabs[self.active_tab_index]
        return None


@dataclass
class LocatedTab:
    """Result of a successful tab lookup."""

    window_position: int
    tab_position: int
    window: Window
    tab: Tab
    already_active: bool = False
