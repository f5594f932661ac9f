from typing import Optional


def normalize_whitespace(text: Optional[str]) -> str:
    """Collapse runs of whitespace into single spaces and strip ends."""
    return " ".join((text or "").split())


def clean_transcript(text: Optional[str]) -> str:
    """Transcripts are shown to the user, so spacing is normalized."""
    return normalize_whitespace(text)


def clean_description(text: Optional[str]) -> str:
    """
    Strip a scene description without touching its inner spacing.

    The direction extractor matches "<N> o'clock" literally, so the
    provider's text is passed through as written.
    """
    return (text or "").strip()
