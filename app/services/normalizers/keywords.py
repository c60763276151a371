"""Keyword tables for deriving a badge icon variant from its text.

Table order is significant: the first category with a matching keyword
wins.
"""

AERO_BADGE_KEYWORDS: dict[str, list[str]] = {
    "contributor": ["contributor"],
    "tester": ["tester"],
    "developer": ["developer"],
}

ENMITY_BADGE_KEYWORDS: dict[str, list[str]] = {
    "dev": ["dev"],
    "staff": ["staff"],
    "supporter": ["support"],
    "contributor": ["contributor"],
}


def determine_badge_type(text: str, keywords: dict[str, list[str]], default: str = "developer") -> str:
    """First category whose keyword occurs in ``text`` (case-insensitive), else ``default``."""
    text_lower = text.lower()
    for badge_type, keyword_list in keywords.items():
        if any(keyword in text_lower for keyword in keyword_list):
            return badge_type
    return default
