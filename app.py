#!/usr/bin/env python3
import os

from flask import Flask, jsonify

from stepup_app import stepup_bp
from stepup_core import BASE_DIR, LOG_FILE, log_action


# ───────────── Config ─────────────
DATA_DIR = os.environ.get("STEPUP_DATA_DIR", os.path.join(BASE_DIR, "stepup_app", "data"))


def create_app(config=None):
    app = Flask(__name__)
    app.config["SECRET_KEY"] = os.environ.get("FLASK_SECRET_KEY", "change-me-to-something-random")
    app.config["STEPUP_DATA_DIR"] = DATA_DIR
    app.config["STEPUP_LOG_FILE"] = LOG_FILE
    if config:
        app.config.update(config)

    app.register_blueprint(stepup_bp, url_prefix="/stepup")

    @app.route("/")
    def index():
        log_action("index_view")
        return jsonify({
            "app": "StepUp",
            "workouts": "/stepup/workouts",
            "progress": "/stepup/progress",
            "types": "/stepup/types",
        })

    return app


app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", "5000")), debug=False)
