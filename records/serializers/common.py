import bleach


def clean_text(v):
    """Trim and strip markup from free text."""
    return bleach.clean((v or '').strip(), strip=True)
