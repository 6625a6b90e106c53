"""Constants for walkgen."""

# Document layout
DOCUMENT_SEPARATOR = "---"
BLOCK_INDICATOR = "|"

# Runtime defaults
DEFAULT_OUTPUT = "walkthrough.py"
DEFAULT_SHELL = "bash"
DEFAULT_HISTORY_SIZE = 10000
DEFAULT_TERMINAL_ROWS = 24
CHROME_ROWS = 18  # header + helpers block reserved above the listing
MIN_PAGE_SIZE = 5

# Editors probed on PATH when neither VISUAL nor EDITOR is usable
EDITOR_CANDIDATES = ("nano", "vim", "nvim", "vi", "micro", "hx", "kak", "emacs -nw")
FALLBACK_EDITOR = "vi"

# Persistent state
STATE_SUBDIR = "walkthrough"
HISTORY_SUFFIX = ".hist"
SNIPPET_SUFFIX = ".snippet"

# Snippet scratch-buffer markers
SNIPPET_START_MARKER = "# <<<SNIPPET>>>"
SNIPPET_END_MARKER = "# <<<END SNIPPET>>>"

# Exit status of a command that could not be started
COMMAND_NOT_FOUND = 127
