"""Shared constant values for the ioaction runtime."""

EFFECT_GRADES = ["pure", "io"]

GRADE_COLORS = {
    "pure": "#8BC34A",
    "io": "#FF7043",
}

ACTION_COLORS = {
    "Print": "#FF7043",
    "ReadLine": "#FFAB91",
    "Pure": "#8BC34A",
    "Bind": "#90CAF9",
    "Sequence": "#FFEB3B",
    "Forever": "#9575CD",
    "Continuation": "#B0BEC5",
}

IO_ACTIONS = frozenset({"Print", "ReadLine"})

DEFAULT_PROGRAM = "hello"

LOGBOOK_FILE = "ioaction.logbook.jsonl"
KEY_FILE = "ioaction_private_key.pem"
PUB_FILE = "ioaction_public_key.pem"
LOGBOOK_LIMIT = 10

EFFECT_LOG_LIMIT = 1000

EXIT_OK = 0
EXIT_END_OF_INPUT = 1
EXIT_USAGE = 2

__all__ = [
    "ACTION_COLORS",
    "DEFAULT_PROGRAM",
    "EFFECT_GRADES",
    "EFFECT_LOG_LIMIT",
    "EXIT_END_OF_INPUT",
    "EXIT_OK",
    "EXIT_USAGE",
    "GRADE_COLORS",
    "IO_ACTIONS",
    "KEY_FILE",
    "LOGBOOK_FILE",
    "LOGBOOK_LIMIT",
    "PUB_FILE",
]
