"""Domain normalization helpers."""


def normalize_currency_code(currency_code: str | None) -> str | None:
    """Normalize currency code values.

    Args:
        currency_code: Raw currency code from a repository.

    Returns:
        str | None: Upper-cased code, or None when blank.
    """
    if not currency_code:
        return None
    cleaned = currency_code.strip()
    return cleaned.upper() if cleaned else None


def normalize_identifier(value: str | None) -> str | None:
    """Strip an identifier and map blanks to None."""
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def normalize_description(description: str | None) -> str | None:
    """Collapse internal whitespace in a free-text description."""
    if not description:
        return None
    cleaned = " ".join(description.split())
    return cleaned or None


__all__ = [
    "normalize_currency_code",
    "normalize_identifier",
    "normalize_description",
]
