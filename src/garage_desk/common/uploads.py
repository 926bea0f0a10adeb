from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename


@dataclass(frozen=True)
class Upload:
    """A file taken from a form post, ready to forward as multipart."""

    filename: str
    content: bytes
    mimetype: str = "application/octet-stream"

    @classmethod
    def from_file_storage(cls, storage: Optional[FileStorage]) -> Optional["Upload"]:
        if storage is None or not storage.filename:
            return None
        content = storage.read()
        if not content:
            return None
        return cls(
            filename=secure_filename(storage.filename) or "upload",
            content=content,
            mimetype=storage.mimetype or "application/octet-stream",
        )

    def as_multipart(self) -> tuple[str, bytes, str]:
        return (self.filename, self.content, self.mimetype)
