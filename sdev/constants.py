"""Constants used across sdev.

Internal literals for the external tools and the picker frame loop. User-facing
knobs live in `sdev.config`.
"""

# Version control
GIT_METADATA_DIR = ".git"

# tmux subcommands
TMUX_CMD_ATTACH = "attach-session"
TMUX_CMD_SWITCH = "switch-client"
TMUX_ENV_VAR = "TMUX"  # Set by tmux for every process running inside a session
TMUX_SEPARATOR_CHARS = (".", ":")  # tmux target syntax splits on these

# Picker frame loop defaults
DEFAULT_TICK_BUDGET_MS = 10  # Ranking work allowed per frame
DEFAULT_POLL_INTERVAL_MS = 16  # Input poll timeout, roughly 60 frames per second
ESC_DELAY_MS = 25  # curses waits this long to tell Esc apart from escape sequences

PROMPT_CHEVRON = "> "
