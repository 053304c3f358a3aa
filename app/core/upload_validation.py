"""Upload checks run before a file reaches the storage engine."""

from app.storage.errors import InvalidArgument
from app.storage.naming import safe_basename


def validate_upload(
    filename: str | None,
    size: int,
    max_size: int,
) -> tuple[str | None, str | None]:
    """
    Validate an upload and return (safe_name, error_message).
    If valid, error_message is None and safe_name is the bare filename.
    """
    if not filename:
        return None, "No file uploaded"
    try:
        safe_name = safe_basename(filename)
    except InvalidArgument as e:
        return None, e.message
    if size > max_size:
        return safe_name, f"File too large. Max size: {max_size // (1024*1024)} MB"
    return safe_name, None
