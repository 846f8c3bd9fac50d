from rulekit.tui.renderers import RulesConsoleUI

__all__ = ["RulesConsoleUI"]
