"""Mapping of (client, reference) pairs onto the storage tree.

Layout: ``root/<client>/<stored>`` (flat, older files) or
``root/<client>/<owner>/<stored>``. A bare stored name is looked up in the flat
layout first and then in every owner directory, so callers never need to know
which layout a file lives in. The owner scan is linear in the number of owner
directories of a client; a large owner count would call for an explicit index.
"""

import logging
from pathlib import Path

from app.storage.errors import InvalidArgument, NotFound

logger = logging.getLogger(__name__)

MAX_REFERENCE_SEGMENTS = 2  # owner/stored


def validate_segment(segment: str, what: str = "path segment") -> str:
    """
    A single path component: non-empty, no separators or NUL, and not
    dot-prefixed. Dot-prefixed names (`.`, `..`, in-flight `.upload-*` files)
    are hidden from listings, so they are never addressable either.
    """
    if (
        not segment
        or segment.startswith(".")
        or "/" in segment
        or "\\" in segment
        or "\x00" in segment
    ):
        raise InvalidArgument(f"Invalid {what}")
    return segment


def split_reference(reference: str) -> list[str]:
    """Split `stored` or `owner/stored` into validated segments."""
    if not reference or reference.startswith("/") or "\\" in reference:
        raise InvalidArgument("Invalid file reference")
    segments = reference.split("/")
    if len(segments) > MAX_REFERENCE_SEGMENTS:
        raise InvalidArgument("Invalid file reference")
    for segment in segments:
        validate_segment(segment, "file reference")
    return segments


class PathResolver:
    """Resolve client namespaces and file references under a storage root."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root).resolve()

    def client_dir(self, client_id: str) -> Path:
        validate_segment(client_id, "client identifier")
        return self.root / client_id

    def target_dir(self, client_id: str, owner: str | None = None) -> Path:
        """Directory a new file is written to (not created here)."""
        base = self.client_dir(client_id)
        if owner is None:
            return base
        return base / validate_segment(owner, "owner")

    def _contained(self, base: Path, candidate: Path) -> Path:
        resolved = candidate.resolve()
        if not resolved.is_relative_to(base.resolve()):
            logger.warning("Rejected reference escaping namespace: %s", candidate.name)
            raise InvalidArgument("Invalid file reference")
        return resolved

    def resolve(self, client_id: str, reference: str) -> Path:
        """Absolute path of an existing file, or NotFound."""
        base = self.client_dir(client_id)
        segments = split_reference(reference)

        direct = self._contained(base, base.joinpath(*segments))
        if direct.is_file():
            return direct

        if len(segments) == 1 and base.is_dir():
            for owner_dir in sorted(p for p in base.iterdir() if p.is_dir()):
                candidate = self._contained(base, owner_dir / segments[0])
                if candidate.is_file():
                    return candidate

        raise NotFound("File not found")

    def relative_path(self, client_id: str, path: Path) -> str:
        """`stored` or `owner/stored` for a resolved path inside the namespace."""
        base = self.client_dir(client_id).resolve()
        return path.resolve().relative_to(base).as_posix()
