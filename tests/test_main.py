"""Tests for the command-line entry point."""

from unittest.mock import MagicMock, patch

import main
from chatfocus.browser.errors import HostConnectionError, PayloadError
from chatfocus.browser.locator import DEFAULT_PATTERNS
from chatfocus.config import Settings


def _run(focus_side_effect=None):
    config = Settings(_env_file=None, cdp_port=9333)
    with patch.object(main, "load_config", return_value=config), patch.object(
        main, "setup_logging"
    ) as setup, patch.object(main, "CDPHost") as host_cls, patch.object(
        main, "focus_chat", side_effect=focus_side_effect
    ) as focus:
        host = MagicMock()
        host_cls.return_value.__enter__.return_value = host
        code = main.main()
    return code, setup, host_cls, focus, host


def test_success_exits_zero():
    code, setup, host_cls, focus, host = _run()
    assert code == 0
    setup.assert_called_once()
    connection = host_cls.call_args.args[0]
    assert connection.port == 9333
    focus.assert_called_once_with(host, list(DEFAULT_PATTERNS))


def test_host_error_exits_one():
    code, *_ = _run(HostConnectionError("Cannot reach Chrome"))
    assert code == 1


def test_payload_error_exits_one():
    code, *_ = _run(PayloadError("Injected script failed", "Error: chat input not found"))
    assert code == 1
