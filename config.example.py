# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use a local, gitignored .env for machine-specific values.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TRACKER_APP_NAME": "App display name (default: task-tracker).",
    "TRACKER_LOG_LEVEL": "Console logging level (default: WARNING).",
    "TRACKER_LOG_TO_FILE": "Write a DEBUG log to <data_dir>/tracker.log (true/false, default: true).",
    # Paths (gitignored)
    "TRACKER_DATA_DIR": "Local data directory (default: .local/task-tracker).",
    "TRACKER_TASKS_PATH": "Task file path (default: <data_dir>/tasks.json).",
    # Session
    "TRACKER_DEFAULT_SORT": "Initial sort order: priority | created | title | completion (default: priority).",
}
