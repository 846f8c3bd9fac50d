from pathlib import Path
from typing import Optional, Sequence


def compact_home_paths_in_text(text: str) -> str:
    home = str(Path.home())
    if text == home:
        return "~"
    return text.replace(f"{home}/", "~/")


def format_frameworks(frameworks: Optional[Sequence[str]]) -> str:
    if frameworks is None:
        return "global"
    return ", ".join(frameworks) if frameworks else "none"


def format_weight(weight: Optional[float]) -> str:
    return "-" if weight is None else f"{weight:g}"
