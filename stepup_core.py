import os
import json
from datetime import datetime

from flask import current_app, has_app_context, has_request_context, request

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
LOG_FILE = os.environ.get("STEPUP_LOG_FILE", os.path.join(BASE_DIR, "logs.jsonl"))


def _log_path():
    if has_app_context():
        return current_app.config.get("STEPUP_LOG_FILE") or LOG_FILE
    return os.environ.get("STEPUP_LOG_FILE") or LOG_FILE


def log_action(action, details=None):
    """Append a single log entry to the action log."""
    in_request = has_request_context()
    entry = {
        "timestamp": datetime.now().strftime("%d/%m/%Y %H:%M"),
        "action": action,
        "ip": request.remote_addr if in_request else None,
        "path": request.path if in_request else None,
        "details": details or {},
        "user_agent": request.headers.get("User-Agent", "") if in_request else "",
    }

    try:
        with open(_log_path(), "a") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError:
        # Don't break the app if logging fails
        pass


def load_logs(limit=200):
    """Load the last `limit` log entries, newest first."""
    if limit < 1:
        return []
    path = _log_path()
    if not os.path.exists(path):
        return []

    try:
        with open(path, "r") as f:
            lines = f.readlines()
    except OSError:
        return []

    entries = []
    for line in lines[-limit:]:
        line = line.strip()
        if not line:
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            continue

    entries.reverse()  # newest first
    return entries
