import re


ROLE_SPLIT_PATTERN = re.compile(r"[,|]")
ROLE_WORD_PATTERN = re.compile(r"[_, ]")

DISPLAY_OVERRIDES = {
    "OP_ABSENSI": "OP_Absensi",
}


def parse_roles(role_str: str | None) -> list[str]:
    """Split a stored role string ("GURU,KAMAD" or "GURU|KAMAD") into uppercase role names."""
    if not role_str:
        return []
    parts = (part.strip().upper() for part in ROLE_SPLIT_PATTERN.split(role_str))
    return list(dict.fromkeys(part for part in parts if part))


def format_role_display(role: str | None) -> str:
    if not role:
        return ""
    override = DISPLAY_OVERRIDES.get(role.upper())
    if override:
        return override
    return " ".join(word.capitalize() for word in ROLE_WORD_PATTERN.split(role) if word)
