# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Use:
- .env (local, gitignored)
- config_local.py (local safe overrides for switches, gitignored)

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TASKFLOW_APP_NAME": "App display name (default: taskflow).",
    "TASKFLOW_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASKFLOW_DATA_DIR": "Local data directory for logs (default: .local/taskflow).",
    # Switches
    "TASKFLOW_CONSOLE_ENABLED": "Run the console REPL (true/false, default: true).",
    "TASKFLOW_SCHEDULER_ENABLED": "Run the background task scheduler (true/false, default: true).",
    "TASKFLOW_SEED_SAMPLE_DATA": "Create the demo admin/alexmorgan accounts on start (default: true).",
    # Scheduler cadence
    "TASKFLOW_SWEEP_INTERVAL_SECONDS": "Overdue sweep period, aligned to multiples (default: 3600).",
    "TASKFLOW_SWEEP_BATCH_LIMIT": "Max tasks flagged overdue per sweep; 0 = no cap (default: 0).",
    "TASKFLOW_REMINDER_TIME": "Local time for daily deadline reminders, HH:MM (default: 09:00).",
    "TASKFLOW_SUMMARY_TIME": "Local time for daily summaries, HH:MM (default: 08:00).",
    # Deadline windows
    "TASKFLOW_REMINDER_HORIZON_HOURS": "Reminder lookahead window in hours (default: 24).",
    "TASKFLOW_DUE_SOON_HORIZON_HOURS": "'Due soon' window in hours for summaries (default: 48).",
    "TASKFLOW_REMINDERS_INCLUDE_OVERDUE": (
        "Also remind about tasks already flagged overdue (true/false, default: true)."
    ),
    "TASKFLOW_REMINDERS_INCLUDE_DONE": (
        "Also remind about tasks already marked done (true/false, default: false)."
    ),
    "TASKFLOW_REMINDER_TOAST_LIMIT": "Reminder alerts shown individually before a roll-up (default: 3).",
}
