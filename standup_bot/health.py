"""HTTP health check, served next to the bot so hosting platforms can probe it."""

import logging
import threading
from typing import TYPE_CHECKING, Optional

from flask import Flask, jsonify

from .models import state_name

if TYPE_CHECKING:
    from .bot import StandUpBot

logger = logging.getLogger(__name__)


def create_app(bot: Optional["StandUpBot"] = None) -> Flask:
    app = Flask(__name__)

    @app.route("/")
    @app.route("/ping")
    def ping():
        return "pong"

    @app.route("/status")
    def status():
        if bot is None:
            return jsonify({"status": "ok"})
        # Read-only snapshot; the bot loop owns the state
        states = dict(bot.machine.states)
        return jsonify(
            {
                "status": "ok",
                "members": {member.name: state_name(state) for member, state in states.items()},
                "discarded": dict(bot.router.discarded),
            }
        )

    return app


def serve_in_background(app: Flask, port: int, host: str = "0.0.0.0") -> threading.Thread:
    thread = threading.Thread(
        target=app.run,
        kwargs={"host": host, "port": port, "use_reloader": False},
        name="health-check",
        daemon=True,
    )
    thread.start()
    logger.info("Web listening on %s:%d", host, port)
    return thread
