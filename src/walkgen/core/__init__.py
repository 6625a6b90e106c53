"""Core business logic for walkgen.

This package contains the generator and the session interpreter:
- compiler: Line-oriented spec compiler producing IR records
- wizard: Interactive constructor producing the same IR records
- serializer: IR records to runtime data model and generated program
- navigation: Command normalization and the navigation state machine
- scratch: Editor buffers for picked suggestions
- snippets: Persistent snippet stash
- history: Persistent command history
- session: Interactive walkthrough interpreter
"""

from .compiler import CompileError, LineCursor, SpecCompiler, compile_file, compile_text
from .history import CommandHistory
from .navigation import (
    Action,
    Command,
    SessionState,
    Transition,
    UserCommandError,
    apply_command,
    compute_page_size,
    normalize_input,
    page_view,
)
from .serializer import build_walkthrough, render_artifact, write_artifact
from .session import SessionExit, WalkthroughSession
from .snippets import PasteMode, SnippetStash
from .wizard import Wizard, WizardError, run_wizard

__all__ = [
    "Action",
    "Command",
    "CommandHistory",
    "CompileError",
    "LineCursor",
    "PasteMode",
    "SessionExit",
    "SessionState",
    "SnippetStash",
    "SpecCompiler",
    "Transition",
    "UserCommandError",
    "WalkthroughSession",
    "Wizard",
    "WizardError",
    "apply_command",
    "build_walkthrough",
    "compile_file",
    "compile_text",
    "compute_page_size",
    "normalize_input",
    "page_view",
    "render_artifact",
    "run_wizard",
    "write_artifact",
]
