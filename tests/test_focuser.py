"""Tests for chat layouts, payload building and ChatFocuser."""

import pytest

from chatfocus.app import focus_chat
from chatfocus.browser.focuser import (
    DEFAULT_LAYOUTS,
    TWITCH_LAYOUT,
    YOUTUBE_LAYOUT,
    ChatFocuser,
    FlatPageLayout,
    LayoutKind,
    build_payload,
)


class TestLayouts:
    def test_kinds(self):
        assert YOUTUBE_LAYOUT.kind is LayoutKind.NESTED_FRAME
        assert TWITCH_LAYOUT.kind is LayoutKind.FLAT_PAGE

    def test_nested_frame_collapses_range_to_end(self):
        js = YOUTUBE_LAYOUT.render()
        assert 'document.querySelector("#chatframe")' in js
        assert js.count('querySelector("#input")') == 2
        assert "removeAllRanges()" in js
        assert "range.collapse(false)" in js
        assert js.index("addRange(range)") < js.index("el.focus()")

    def test_flat_page_is_direct_focus(self):
        js = TWITCH_LAYOUT.render()
        assert "[data-a-target=\\\"chat-input\\\"]" in js
        assert ".focus()" in js
        assert "Range" not in js

    def test_selector_is_escaped(self):
        js = FlatPageLayout(name="odd", selector="a'b\"c").render()
        assert '"a\'b\\"c"' in js


class TestBuildPayload:
    def test_empty_layouts_rejected(self):
        with pytest.raises(ValueError):
            build_payload([])

    def test_single_layout_is_unguarded(self):
        payload = build_payload([TWITCH_LAYOUT])
        assert "try" not in payload
        assert "catch" not in payload

    def test_primary_guarded_fallback_unguarded(self):
        payload = build_payload(DEFAULT_LAYOUTS)
        assert payload.count("try {") == 1
        assert payload.count("catch (e) {}") == 1
        primary = payload.index("#chatframe")
        catch = payload.index("catch (e) {}")
        fallback = payload.index("chat-input")
        assert payload.index("try {") < primary < catch < fallback

    def test_attempt_order_follows_list(self):
        payload = build_payload([TWITCH_LAYOUT, YOUTUBE_LAYOUT])
        assert payload.index("chat-input") < payload.index("catch (e) {}") < payload.index("#chatframe")

    def test_self_invoking(self):
        payload = build_payload(DEFAULT_LAYOUTS)
        assert payload.startswith("(function () {")
        assert payload.endswith("})();")


class TestChatFocuser:
    def test_focus_dispatches_payload(self, make_host):
        host = make_host([["https://www.twitch.tv/x"]])
        tab = host.windows()[0].tabs[0]
        focuser = ChatFocuser(host)

        focuser.focus(tab)

        assert host.calls == [("execute", tab.target_id, build_payload(DEFAULT_LAYOUTS))]


class TestFocusChat:
    def test_injects_into_located_tab(self, make_host):
        host = make_host([["example.com"], ["x.com", "twitch.tv/someuser"]])
        located = focus_chat(host)

        assert located.tab.url == "twitch.tv/someuser"
        assert host.calls[0] == ("activate",)
        assert host.calls[-1][:2] == ("execute", "t1-1")

    def test_no_match_injects_into_active_tab(self, make_host):
        host = make_host([["example.com", "other.com"]], active=[1])
        assert focus_chat(host) is None
        assert host.mutations == []
        assert host.calls[-1][:2] == ("execute", "t0-1")

    def test_no_windows_skips_injection(self, make_host):
        host = make_host([])
        assert focus_chat(host) is None
        assert not [c for c in host.calls if c[0] == "execute"]
