# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKDECK_APP_NAME": "App display name (default: taskdeck).",
    "TASKDECK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TASKDECK_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    # Paths (gitignored)
    "TASKDECK_DATA_DIR": "Local data directory (default: .local/taskdeck).",
    "TASKDECK_STORAGE_PATH": "Key/value SQLite path (default: <data_dir>/storage.sqlite3).",
    "TASKDECK_LOG_DIR": "Directory for taskdeck.log (default: <data_dir>).",
    # Storage
    "TASKDECK_IN_MEMORY": "Keep tasks in memory only; nothing is saved (true/false).",
}
