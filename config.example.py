# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKBOT_APP_NAME": "App display name (default: taskbot).",
    "TASKBOT_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKBOT_DATA_DIR": "Local data directory for logs and the Matrix session (default: .local/taskbot).",
    # Connectors
    "TASKBOT_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    "TASKBOT_MATRIX_ENABLED": "Enable Matrix connector (true/false, default: false).",
    # Console identity
    "TASKBOT_CONSOLE_USER_ID": "Integer identity used by the console (default: 1, must be > 0).",
    "TASKBOT_CONSOLE_USERNAME": "Username shown for the console identity (default: $USER).",
    # Matrix
    "TASKBOT_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "TASKBOT_MATRIX_USER_ID": "Matrix user ID (bot).",
    "TASKBOT_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "TASKBOT_MATRIX_ROOMS": "Optional allowlist of room IDs (empty => all rooms).",
    "TASKBOT_MATRIX_STORE_PATH": "Matrix session/E2EE store path (default: <data_dir>/matrix_store).",
    "TASKBOT_MATRIX_WORKERS": "Max commands handled at once by the Matrix connector (default: 8).",
}
