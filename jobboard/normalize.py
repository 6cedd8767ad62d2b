def normalize_whitespace(s: str) -> str:
    return " ".join((s or "").split())


def normalize_name(name: str) -> str:
    return normalize_whitespace(name)


def normalize_email(email: str) -> str:
    # Addresses are stored trimmed and lower-cased so duplicate checks and
    # lookups by e-mail are case-insensitive.
    return (email or "").strip().lower()


def normalize_choices(values) -> tuple:
    """Coerce an options/keywords list into a tuple of trimmed, non-empty strings."""
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    out = []
    for v in values:
        if isinstance(v, str) and v.strip():
            out.append(v.strip())
    return tuple(out)
