# schemas/common.py


def blank_to_none(value):
    # Optional text fields store NULL, never ""
    if isinstance(value, str) and not value.strip():
        return None
    return value
