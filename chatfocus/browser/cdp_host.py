"""CDP Host — drives the user's running Chrome over the DevTools Protocol.

Chrome must be started with ``--remote-debugging-port``. Tab enumeration
uses the HTTP ``/json/list`` endpoint, which reports page targets most
recently activated first. Each window's active tab is the one whose page
reports itself visible, with recency as the fallback. Window commands go
over the browser-level websocket advertised by ``/json/version``.
"""

import json
from typing import Dict, List, Optional

import requests
import websocket
from loguru import logger

from chatfocus.browser.errors import HostConnectionError, HostError, PayloadError
from chatfocus.browser.host import BrowserHost
from chatfocus.browser.models import FOREGROUND_INDEX, Tab, Window

MINIMIZED = "minimized"
NORMAL = "normal"


# ═══════════════════════════════════════════════════════════════════════════════
# CDP Connection
# ═══════════════════════════════════════════════════════════════════════════════


class CDPConnection:
    """Browser-level CDP websocket plus the HTTP discovery endpoints."""

    def __init__(self, host: str = "127.0.0.1", port: int = 9222, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.ws = None
        self._cmd_id = 0

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    def _get_json(self, path: str):
        try:
            r = requests.get(f"{self.base_url}{path}", timeout=self.timeout)
            r.raise_for_status()
            return r.json()
        except requests.RequestException as e:
            raise HostConnectionError(
                f"Cannot reach Chrome remote debugging at {self.base_url}: {e}"
            ) from e

    def get_targets(self) -> List[dict]:
        """List open targets, most recently activated first."""
        return self._get_json("/json/list")

    def connect(self):
        """Open the browser-level websocket if not already open."""
        if self.ws is not None:
            return
        version = self._get_json("/json/version")
        ws_url = version.get("webSocketDebuggerUrl")
        if not ws_url:
            raise HostConnectionError("Chrome did not advertise a browser websocket")
        try:
            self.ws = websocket.create_connection(ws_url, timeout=self.timeout)
        except (OSError, websocket.WebSocketException) as e:
            raise HostConnectionError(f"Websocket connection failed: {e}") from e
        logger.debug(f"[CDP] Connected to {ws_url}")

    def _post(self, method: str, params: Optional[dict], session_id: Optional[str]) -> int:
        self.connect()
        self._cmd_id += 1
        cmd = {"id": self._cmd_id, "method": method}
        if params:
            cmd["params"] = params
        if session_id:
            cmd["sessionId"] = session_id
        try:
            self.ws.send(json.dumps(cmd))
        except (OSError, websocket.WebSocketException) as e:
            raise HostConnectionError(f"{method} could not be sent: {e}") from e
        return self._cmd_id

    def send(
        self, method: str, params: Optional[dict] = None, session_id: Optional[str] = None
    ) -> dict:
        """Send a command and return its ``result`` payload."""
        cmd_id = self._post(method, params, session_id)
        # Read until we get our response
        while True:
            try:
                raw = self.ws.recv()
            except (OSError, websocket.WebSocketException) as e:
                raise HostConnectionError(f"No reply to {method}: {e}") from e
            data = json.loads(raw)
            if data.get("id") != cmd_id:
                continue  # event or stale reply
            if "error" in data:
                error = data["error"]
                raise HostError(f"{method} failed: {error.get('message', error)}")
            return data.get("result", {})

    def send_nowait(
        self, method: str, params: Optional[dict] = None, session_id: Optional[str] = None
    ):
        """Send a command without reading its reply."""
        self._post(method, params, session_id)

    def close(self):
        if self.ws is not None:
            try:
                self.ws.close()
            except (OSError, websocket.WebSocketException) as e:
                logger.debug(f"[CDP] Close error: {e}")
            self.ws = None


# ═══════════════════════════════════════════════════════════════════════════════
# CDP Host
# ═══════════════════════════════════════════════════════════════════════════════


class CDPHost(BrowserHost):
    """``BrowserHost`` backed by a Chrome remote debugging session."""

    def __init__(self, connection: CDPConnection, wait_for_result: bool = False):
        """Initialise the host.

        Args:
            connection: CDP transport to the running browser
            wait_for_result: Block on injected scripts and raise
                ``PayloadError`` when they throw
        """
        self.cdp = connection
        self.wait_for_result = wait_for_result
        # Window state before a minimize, so restoring keeps maximized windows maximized
        self._restore_states: Dict[int, str] = {}
        self._windows: Optional[List[Window]] = None
        # Target most recently sent Target.activateTarget
        self._activated: Optional[str] = None

    # ── Enumeration ──────────────────────────────────────────────────────

    def windows(self) -> List[Window]:
        by_id: Dict[int, Window] = {}
        # Position in /json/list, most recently activated first
        recency: Dict[str, int] = {}
        for target in self.cdp.get_targets():
            if target.get("type") != "page":
                continue
            tab = Tab(
                target_id=target["id"],
                url=target.get("url", ""),
                title=target.get("title", ""),
            )
            recency[tab.target_id] = len(recency)
            info = self.cdp.send("Browser.getWindowForTarget", {"targetId": tab.target_id})
            window_id = info["windowId"]
            window = by_id.get(window_id)
            if window is None:
                state = info.get("bounds", {}).get("windowState", NORMAL)
                window = Window(window_id=window_id, visible=state != MINIMIZED)
                by_id[window_id] = window
                self._restore_states.setdefault(window_id, NORMAL if state == MINIMIZED else state)
            window.tabs.append(tab)

        for window in by_id.values():
            window.active_tab_index = self._find_visible_tab(window)

        # A background tab opened after the last switch is newer than the shown
        # one, so windows are ordered by their active tab, not their newest tab.
        self._windows = sorted(
            by_id.values(), key=lambda w: recency[w.active_tab.target_id]
        )
        for position, window in enumerate(self._windows):
            window.index = position
        self._activated = None
        logger.debug(
            f"[CDPHost] {len(self._windows)} window(s), "
            f"{sum(len(w.tabs) for w in self._windows)} tab(s)"
        )
        return self._windows

    def _find_visible_tab(self, window: Window) -> int:
        """Index of the tab the window is showing, else its most recent tab."""
        if window.visible:
            for position, tab in enumerate(window.tabs):
                if self._page_visible(tab):
                    return position
        return 0

    def _page_visible(self, tab: Tab) -> bool:
        try:
            attached = self.cdp.send(
                "Target.attachToTarget", {"targetId": tab.target_id, "flatten": True}
            )
            session_id = attached["sessionId"]
            try:
                result = self.cdp.send(
                    "Runtime.evaluate",
                    {"expression": "document.visibilityState", "returnByValue": True},
                    session_id=session_id,
                )
            finally:
                self.cdp.send("Target.detachFromTarget", {"sessionId": session_id})
        except HostConnectionError:
            raise
        except HostError as e:
            logger.debug(f"[CDPHost] Visibility check failed for {tab.target_id[:8]}: {e}")
            return False
        return result.get("result", {}).get("value") == "visible"

    # ── Mutations ────────────────────────────────────────────────────────

    def activate(self):
        windows = self._windows if self._windows is not None else self.windows()
        if windows and not windows[0].visible:
            self.set_visible(windows[0], True)

    def set_active_tab(self, window: Window, tab_index: int):
        tab = window.tabs[tab_index]
        self._activate_target(tab)
        window.active_tab_index = tab_index

    def set_window_index(self, window: Window, index: int):
        if index != FOREGROUND_INDEX:
            raise HostError("CDP can only raise a window to the foreground")
        tab = window.active_tab
        if tab is None:
            raise HostError(f"Window {window.window_id} has no tabs to activate")
        # Activating a tab also raises the window holding it
        self._activate_target(tab)
        window.index = index

    def _activate_target(self, tab: Tab):
        if self._activated == tab.target_id:
            return
        self.cdp.send("Target.activateTarget", {"targetId": tab.target_id})
        self._activated = tab.target_id

    def set_visible(self, window: Window, visible: bool):
        if visible:
            state = self._restore_states.get(window.window_id, NORMAL)
        else:
            state = MINIMIZED
        self.cdp.send(
            "Browser.setWindowBounds",
            {"windowId": window.window_id, "bounds": {"windowState": state}},
        )
        window.visible = visible

    # ── Script execution ─────────────────────────────────────────────────

    def execute(self, tab: Tab, javascript: str):
        attached = self.cdp.send(
            "Target.attachToTarget", {"targetId": tab.target_id, "flatten": True}
        )
        session_id = attached["sessionId"]
        params = {"expression": javascript, "userGesture": True}

        if not self.wait_for_result:
            self.cdp.send_nowait("Runtime.evaluate", params, session_id=session_id)
            logger.debug(f"[CDPHost] Dispatched script to {tab.target_id[:8]}")
            return

        result = self.cdp.send("Runtime.evaluate", params, session_id=session_id)
        details = result.get("exceptionDetails")
        if details:
            description = (details.get("exception") or {}).get("description") or details.get(
                "text", ""
            )
            raise PayloadError(f"Injected script failed in {tab.url[:80]}", description)

    def close(self):
        self.cdp.close()
