"""Substring search patterns for ILIKE filters"""

LIKE_ESCAPE = "\\"


def contains_pattern(text: str) -> str:
    """Wrap user text in % wildcards with its own % and _ matched literally"""
    escaped = (
        text.strip()
        .replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
