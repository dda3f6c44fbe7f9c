# config_local.example.py

"""
Example local overrides.

Usage:
  1) Copy this file to `config_local.py`
  2) Adjust values for your machine
  3) Never commit `config_local.py` (it is gitignored)

Prefer `.env` for everything else. Only the switches below are read from here.
"""

# Example: run the scheduler only (no REPL), e.g. as a service
# CONSOLE_ENABLED = False

# Example: start with an empty store
# SEED_SAMPLE_DATA = False

# Example: disable the background scheduler while poking at data by hand
# SCHEDULER_ENABLED = False
