"""Main entry point: focus the chat input of the open streaming tab."""
import sys

from loguru import logger

from chatfocus.app import focus_chat
from chatfocus.browser.cdp_host import CDPConnection, CDPHost
from chatfocus.browser.errors import HostError, PayloadError
from chatfocus.config import load_config
from chatfocus.utils.logging_config import setup_logging


def main() -> int:
    config = load_config()
    setup_logging(config.log_level, config.log_dir)

    connection = CDPConnection(config.cdp_host, config.cdp_port, config.cdp_timeout)
    try:
        with CDPHost(connection, wait_for_result=config.wait_for_result) as host:
            focus_chat(host, config.target_patterns)
    except HostError as e:
        logger.error(f"Could not focus chat: {e}")
        if isinstance(e, PayloadError) and e.description:
            logger.debug(e.description)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
