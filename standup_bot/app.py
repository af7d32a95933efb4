import logging
import queue
import sys
import threading

from dotenv import load_dotenv
from slack_sdk import WebClient

from .bot import StandUpBot
from .config import BotConfig
from .directory import SlackDirectory
from .errors import ConfigError, ListenerError
from .health import create_app, serve_in_background
from .listener import SocketModeListener
from .notifier import SlackNotifier
from .utils import configure_logging

logger = logging.getLogger(__name__)


def _run_listener(listener: SocketModeListener, stop_event: threading.Event, failed: threading.Event) -> None:
    try:
        listener.run(stop_event)
    except ListenerError as e:
        logger.error("❌ %s", e)
        failed.set()
        stop_event.set()


def main() -> int:
    """Start the stand-up bot: listener thread, health check and the stand-up loop."""
    load_dotenv(".env")

    try:
        bot_config = BotConfig.from_env()
    except ConfigError as e:
        configure_logging()
        logger.error("❌ Config error: %s", e)
        return 1

    configure_logging(bot_config.log_level, bot_config.log_file)

    web_client = WebClient(token=bot_config.slack_bot_token)
    try:
        config = bot_config.resolve(SlackDirectory(web_client))
    except ConfigError as e:
        logger.error("❌ Config error: %s", e)
        return 1

    events = queue.Queue()
    bot = StandUpBot(config, SlackNotifier(web_client), events=events)

    stop_event = threading.Event()
    listener_failed = threading.Event()
    listener = SocketModeListener(bot_config.slack_app_token, web_client, events)
    threading.Thread(
        target=_run_listener,
        args=(listener, stop_event, listener_failed),
        name="slack-listener",
        daemon=True,
    ).start()

    serve_in_background(create_app(bot), bot_config.port)

    try:
        bot.run(stop_event, tick_seconds=bot_config.tick_seconds)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        stop_event.set()

    return 1 if listener_failed.is_set() else 0


if __name__ == "__main__":
    sys.exit(main())
