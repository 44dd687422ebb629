"""Chat Focuser — focuses a streaming site's chat input from inside the page.

Each supported page shape is a ``ChatLayout`` variant that renders its own
JavaScript function. ``build_payload`` chains an ordered list of layouts so
that a fault in one layout falls through to the next, and a fault in the
last one escapes the injected script.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from loguru import logger

from chatfocus.browser.host import BrowserHost
from chatfocus.browser.models import Tab

# Throws instead of returning null so a missing node is a fault like any other.
_REQUIRE_JS = (
    "const require = (node, selector) => {\n"
    "    if (!node) throw new Error('chat input not found: ' + selector);\n"
    "    return node;\n"
    "  };"
)


class LayoutKind(str, Enum):
    NESTED_FRAME = "nested_frame"
    FLAT_PAGE = "flat_page"


@dataclass(frozen=True)
class NestedFrameLayout:
    """Chat input inside an embedded frame (YouTube live chat).

    The frame document holds a wrapper and an inner editable that share
    ``input_selector``, so the selector is applied twice.
    """

    name: str
    frame_selector: str
    input_selector: str

    kind = LayoutKind.NESTED_FRAME

    def render(self) -> str:
        frame_sel = json.dumps(self.frame_selector)
        input_sel = json.dumps(self.input_selector)
        return (
            "function () {\n"
            f"  {_REQUIRE_JS}\n"
            f"  const frame = require(document.querySelector({frame_sel}), {frame_sel});\n"
            "  const frameWindow = frame.contentWindow;\n"
            "  const doc = frameWindow.document;\n"
            f"  const wrapper = require(doc.querySelector({input_sel}), {input_sel});\n"
            f"  const el = require(wrapper.querySelector({input_sel}), {input_sel});\n"
            "  const selection = frameWindow.getSelection();\n"
            "  const range = doc.createRange();\n"
            "  selection.removeAllRanges();\n"
            "  range.selectNodeContents(el);\n"
            "  range.collapse(false);\n"
            "  selection.addRange(range);\n"
            "  el.focus();\n"
            "}"
        )


@dataclass(frozen=True)
class FlatPageLayout:
    """Chat input directly in the top-level page (Twitch)."""

    name: str
    selector: str

    kind = LayoutKind.FLAT_PAGE

    def render(self) -> str:
        sel = json.dumps(self.selector)
        return (
            "function () {\n"
            f"  {_REQUIRE_JS}\n"
            f"  require(document.querySelector({sel}), {sel}).focus();\n"
            "}"
        )


ChatLayout = Union[NestedFrameLayout, FlatPageLayout]

YOUTUBE_LAYOUT = NestedFrameLayout(
    name="youtube", frame_selector="#chatframe", input_selector="#input"
)
TWITCH_LAYOUT = FlatPageLayout(
    name="twitch", selector='[data-a-target="chat-input"]'
)

DEFAULT_LAYOUTS = (YOUTUBE_LAYOUT, TWITCH_LAYOUT)


def build_payload(layouts: Sequence[ChatLayout]) -> str:
    """Render layouts into one self-invoking script, tried in order.

    Args:
        layouts: Layouts in priority order

    Returns:
        JavaScript source. Every layout but the last is guarded; the
        last one runs unguarded so its fault propagates.
    """
    if not layouts:
        raise ValueError("At least one chat layout is required")

    *guarded, last = layouts
    parts = ["(function () {"]
    for layout in guarded:
        parts.append(f"  // {layout.name} ({layout.kind.value})")
        parts.append("  try {")
        parts.append(f"    ({layout.render()})();")
        parts.append("    return;")
        parts.append("  } catch (e) {}")
    parts.append(f"  // {last.name} ({last.kind.value})")
    parts.append(f"  ({last.render()})();")
    parts.append("})();")
    return "\n".join(parts)


class ChatFocuser:
    """Inject the chat-focus payload into a tab."""

    def __init__(self, host: BrowserHost, layouts: Sequence[ChatLayout] = DEFAULT_LAYOUTS):
        self.host = host
        self.layouts = list(layouts)
        self.payload = build_payload(self.layouts)

    def focus(self, tab: Tab):
        """Dispatch the payload to ``tab``; no result is consumed."""
        names = ", ".join(layout.name for layout in self.layouts)
        logger.info(f"[ChatFocuser] Focusing chat input ({names}) in {tab.url[:80]}")
        self.host.execute(tab, self.payload)
