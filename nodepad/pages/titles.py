import re

UNTITLED = "Untitled"

_LINE_BREAKS = re.compile(r"[\r\n]+")


def extract_title(content: str | None, fallback_name: str = "") -> str:
    """Text of the first "# " heading, else the fallback name, else "Untitled"."""
    for line in _LINE_BREAKS.split(content or ""):
        trimmed = line.strip()
        if trimmed.startswith("# "):
            return trimmed[1:].strip()
    return fallback_name or UNTITLED
