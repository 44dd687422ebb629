"""Run orchestration: raise the streaming tab, then focus its chat input."""

from typing import Optional, Sequence

from loguru import logger

from chatfocus.browser.focuser import DEFAULT_LAYOUTS, ChatFocuser, ChatLayout
from chatfocus.browser.host import BrowserHost
from chatfocus.browser.locator import DEFAULT_PATTERNS, TabLocator
from chatfocus.browser.models import LocatedTab


def focus_chat(
    host: BrowserHost,
    patterns: Sequence[str] = DEFAULT_PATTERNS,
    layouts: Sequence[ChatLayout] = DEFAULT_LAYOUTS,
) -> Optional[LocatedTab]:
    """Locate the streaming tab and inject the chat-focus payload.

    When no tab matches, the payload still goes to the foremost window's
    active tab.

    Returns:
        The located tab, or None when nothing matched.
    """
    host.activate()
    located = TabLocator(host, patterns).locate()

    if located is not None:
        tab = located.tab
    else:
        windows = host.windows()
        tab = windows[0].active_tab if windows else None
        if tab is None:
            logger.warning("No active tab to focus")
            return None

    ChatFocuser(host, layouts).focus(tab)
    return located
