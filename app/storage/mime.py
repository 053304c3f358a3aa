"""MIME type detection and content categories for statistics."""

import mimetypes

DEFAULT_MIME_TYPE = "application/octet-stream"
OTHER_CATEGORY = "Other"

# Extensions the platform mimetypes table misses or gets wrong
EXT_TO_MIME: dict[str, str] = {
    ".md": "text/markdown",
    ".csv": "text/csv",
    ".json": "application/json",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".svg": "image/svg+xml",
    ".webm": "video/webm",
    ".mkv": "video/x-matroska",
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
    ".7z": "application/x-7z-compressed",
    ".rar": "application/vnd.rar",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}

MIME_TO_CATEGORY: dict[str, str] = {
    "application/pdf": "PDF",
    "application/msword": "Documents",
    "application/rtf": "Documents",
    "application/vnd.oasis.opendocument.text": "Documents",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "Documents",
    "application/vnd.ms-excel": "Spreadsheets",
    "application/vnd.oasis.opendocument.spreadsheet": "Spreadsheets",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "Spreadsheets",
    "text/csv": "Spreadsheets",
    "application/vnd.ms-powerpoint": "Presentations",
    "application/vnd.oasis.opendocument.presentation": "Presentations",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "Presentations",
    "application/zip": "Archives",
    "application/gzip": "Archives",
    "application/x-tar": "Archives",
    "application/x-bzip2": "Archives",
    "application/x-7z-compressed": "Archives",
    "application/vnd.rar": "Archives",
    "application/x-rar-compressed": "Archives",
    "application/json": "Text",
    "application/xml": "Text",
}

# Fallback on the top-level type
MAJOR_TO_CATEGORY: dict[str, str] = {
    "image": "Images",
    "video": "Videos",
    "audio": "Audio",
    "text": "Text",
}


def detect_mime_type(filename: str) -> str:
    """MIME type from the filename's extension; octet-stream when unknown."""
    ext = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext in EXT_TO_MIME:
        return EXT_TO_MIME[ext]
    guessed, _ = mimetypes.guess_type(filename, strict=False)
    return guessed or DEFAULT_MIME_TYPE


def category_for(mime_type: str | None) -> str:
    if not mime_type:
        return OTHER_CATEGORY
    base_type = mime_type.split(";")[0].strip().lower()
    if base_type in MIME_TO_CATEGORY:
        return MIME_TO_CATEGORY[base_type]
    return MAJOR_TO_CATEGORY.get(base_type.split("/", 1)[0], OTHER_CATEGORY)
