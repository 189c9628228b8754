"""Fixed-width formatting helpers for listings."""

from tracker.db.models import Status

__all__ = ["get_column_string", "status_label", "STATUS_LABELS"]

ELLIPSIS = "..."

STATUS_LABELS = {
    Status.OPEN: "OPEN",
    Status.IN_PROGRESS: "IN PROGRESS",
    Status.RESOLVED: "RESOLVED",
    Status.CLOSED: "CLOSED",
}


def get_column_string(text: str, width: int) -> str:
    """
    Fit text into a column of exactly `width` characters.

    Shorter text is padded with spaces, longer text is cut and ends with
    "...". Columns of three characters or fewer only have room for dots.
    """
    if len(text) == width:
        return text
    if len(text) < width:
        return text + " " * (width - len(text))
    if width <= len(ELLIPSIS):
        return "." * width
    return text[:width - len(ELLIPSIS)] + ELLIPSIS


def status_label(status: Status) -> str:
    return STATUS_LABELS[status]
