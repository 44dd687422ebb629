"""Tab Locator — finds the streaming tab and raises it to the front.

The first tab whose address contains one of the target patterns wins,
in window order then tab order. Nothing is touched when the foremost
window is already showing a matching tab.
"""

from typing import Iterable, List, Optional, Sequence

from loguru import logger

from chatfocus.browser.host import BrowserHost
from chatfocus.browser.models import FOREGROUND_INDEX, LocatedTab, Window

YOUTUBE_WATCH_PATTERN = "youtube.com/watch?v="
TWITCH_PATTERN = "twitch.tv/"

DEFAULT_PATTERNS = (YOUTUBE_WATCH_PATTERN, TWITCH_PATTERN)


def url_matches(url: str, patterns: Iterable[str]) -> bool:
    """Case-sensitive substring match of any pattern against the full URL."""
    return any(pattern in url for pattern in patterns)


def find_first_match(
    windows: Sequence[Window], patterns: Sequence[str]
) -> Optional[LocatedTab]:
    """Return the first matching tab in window-then-tab enumeration order."""
    for win_pos, window in enumerate(windows):
        for tab_pos, tab in enumerate(window.tabs):
            if url_matches(tab.url, patterns):
                return LocatedTab(
                    window_position=win_pos,
                    tab_position=tab_pos,
                    window=window,
                    tab=tab,
                )
    return None


class TabLocator:
    """Locate a tab by URL pattern and bring it to the foreground."""

    def __init__(self, host: BrowserHost, patterns: Sequence[str] = DEFAULT_PATTERNS):
        """Initialise the locator.

        Args:
            host: Automation host to inspect and mutate
            patterns: Literal URL substrings identifying target pages
        """
        self.host = host
        self.patterns: List[str] = list(patterns)

    def matches(self, url: str) -> bool:
        return url_matches(url, self.patterns)

    def locate(self) -> Optional[LocatedTab]:
        """Find the target tab and raise it.

        Returns:
            The located tab, or None when no tab matches. A miss is not
            an error: the caller carries on with whatever tab is active.
        """
        windows = self.host.windows()
        if not windows:
            logger.info("[TabLocator] Browser has no open windows")
            return None

        front = windows[0]
        active = front.active_tab
        if active is not None and self.matches(active.url):
            logger.debug(f"[TabLocator] Active tab already matches: {active.url[:80]}")
            return LocatedTab(
                window_position=0,
                tab_position=front.active_tab_index,
                window=front,
                tab=active,
                already_active=True,
            )

        found = find_first_match(windows, self.patterns)
        if found is None:
            logger.info(f"[TabLocator] No tab matches {self.patterns}")
            return None

        self._raise(found)
        logger.info(
            f"[TabLocator] Raised window {found.window_position} "
            f"tab {found.tab_position}: {found.tab.url[:80]}"
        )
        return found

    def _raise(self, found: LocatedTab):
        window = found.window
        self.host.set_active_tab(window, found.tab_position)
        self.host.set_window_index(window, FOREGROUND_INDEX)
        if found.window_position != 0:
            # A single visibility write does not always repaint the window
            self.host.set_visible(window, False)
            self.host.set_visible(window, True)
