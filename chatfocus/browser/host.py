"""Browser Host — the automation host contract.

The locator and focuser only talk to the browser through this interface,
so the CDP implementation can be swapped for an in-memory one in tests.
"""

from abc import ABC, abstractmethod
from typing import List

from chatfocus.browser.models import Tab, Window


class BrowserHost(ABC):
    """Abstract automation host exposing windows, tabs and script execution."""

    @abstractmethod
    def activate(self):
        """Bring the browser application to the front."""

    @abstractmethod
    def windows(self) -> List[Window]:
        """Return open windows, foremost first, each with its ordered tabs."""

    @abstractmethod
    def set_active_tab(self, window: Window, tab_index: int):
        """Select ``window.tabs[tab_index]`` as the window's active tab."""

    @abstractmethod
    def set_window_index(self, window: Window, index: int):
        """Move the window to stacking position ``index``."""

    @abstractmethod
    def set_visible(self, window: Window, visible: bool):
        """Show or hide the window."""

    @abstractmethod
    def execute(self, tab: Tab, javascript: str):
        """Run ``javascript`` inside the tab's page context.

        Fire-and-forget: implementations do not hand a result back.
        """

    def close(self):
        """Release any connection held by the host."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
