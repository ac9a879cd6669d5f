from enum import Enum

class LatheStatus(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"
    FAILURE = "failure"
