"""Pytest configuration and fixtures."""
from typing import List, Sequence

import pytest

from chatfocus.browser.host import BrowserHost
from chatfocus.browser.models import Tab, Window


class RecordingHost(BrowserHost):
    """In-memory host that records every call made against it."""

    def __init__(self, windows: Sequence[Sequence[str]], active: Sequence[int] = ()):
        self._windows: List[Window] = []
        for w_pos, urls in enumerate(windows):
            tabs = [Tab(target_id=f"t{w_pos}-{t_pos}", url=url) for t_pos, url in enumerate(urls)]
            window = Window(window_id=100 + w_pos, tabs=tabs, index=w_pos)
            if w_pos < len(active):
                window.active_tab_index = active[w_pos]
            self._windows.append(window)
        self.calls: list = []

    @property
    def mutations(self) -> list:
        return [c for c in self.calls if c[0] in ("set_active_tab", "set_window_index", "set_visible")]

    def activate(self):
        self.calls.append(("activate",))

    def windows(self) -> List[Window]:
        return self._windows

    def set_active_tab(self, window, tab_index):
        self.calls.append(("set_active_tab", window.window_id, tab_index))
        window.active_tab_index = tab_index

    def set_window_index(self, window, index):
        self.calls.append(("set_window_index", window.window_id, index))
        window.index = index

    def set_visible(self, window, visible):
        self.calls.append(("set_visible", window.window_id, visible))
        window.visible = visible

    def execute(self, tab, javascript):
        self.calls.append(("execute", tab.target_id, javascript))


@pytest.fixture
def make_host():
    """Build a RecordingHost from nested URL lists."""
    return RecordingHost
