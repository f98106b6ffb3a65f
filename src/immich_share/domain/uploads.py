"""Domain models for upload batches."""

from dataclasses import dataclass, field
from typing import BinaryIO


@dataclass(frozen=True)
class IncomingFile:
    """A file received from the browser, not yet written to disk."""

    filename: str
    content_type: str | None
    size: int
    stream: BinaryIO


@dataclass(frozen=True)
class FileResult:
    """Outcome for one file of a batch."""

    filename: str
    success: bool
    asset_id: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"success": self.success, "filename": self.filename}
        if self.success:
            data["assetId"] = self.asset_id
        else:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class Outcome:
    """Result of a best-effort step whose failure must not abort the batch."""

    ok: bool
    error: str | None = None

    @classmethod
    def success(cls) -> "Outcome":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "Outcome":
        return cls(ok=False, error=error)


@dataclass
class UploadBatchResult:
    """Aggregated result returned to the browser."""

    album_id: str
    album_name: str
    results: list[FileResult] = field(default_factory=list)
    attach_outcome: Outcome | None = None

    @property
    def uploaded_asset_ids(self) -> list[str]:
        return [r.asset_id for r in self.results if r.success and r.asset_id]

    @property
    def uploaded_count(self) -> int:
        return len(self.uploaded_asset_ids)

    @property
    def total_count(self) -> int:
        return len(self.results)

    def to_dict(self) -> dict[str, object]:
        return {
            "success": True,
            "albumId": self.album_id,
            "albumName": self.album_name,
            "uploadedCount": self.uploaded_count,
            "totalCount": self.total_count,
            "results": [result.to_dict() for result in self.results],
        }
