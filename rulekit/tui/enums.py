from enum import Enum


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


class RuleStatus(str, Enum):
    ACTIVE = "active"
    INCOMPLETE = "incomplete"
    INVALID = "invalid"


RULE_STATUS_STYLE = {
    RuleStatus.ACTIVE: UIStyle.GREEN.value,
    RuleStatus.INCOMPLETE: UIStyle.YELLOW.value,
    RuleStatus.INVALID: UIStyle.RED.value,
}
