"""ImageJob and ImageList documents and their statuses."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .types import GROUP, GroupVersion, _integer, _object, _string, _string_list

V1 = GroupVersion(GROUP, "v1")
V1ALPHA1 = GroupVersion(GROUP, "v1alpha1")
V1ALPHA1_DEPRECATION_WARNING = "v1alpha1 of the eraser API has been deprecated. Please migrate to v1."


class JobPhase(str, Enum):
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"

    def __str__(self) -> str:
        return self.value


def _phase(value: Any) -> JobPhase | str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"status.phase: expected a string, got {value!r}")
    try:
        return JobPhase(value)
    except ValueError:
        return value


def _parse_time(value: Any, where: str) -> datetime.datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{where}: expected an RFC 3339 time string, got {value!r}")
    text = value[:-1] + "+00:00" if value.endswith(("Z", "z")) else value
    try:
        parsed = datetime.datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"{where}: invalid time {value!r}") from exc
    if parsed.tzinfo is None:
        raise ValueError(f"{where}: time {value!r} has no time zone")
    return parsed


def _format_time(value: datetime.datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.timezone.utc)
    return value.astimezone(datetime.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _metadata(data: dict) -> dict[str, Any]:
    return dict(_object(data.get("metadata"), "metadata"))


def _type_meta(api_version: str, kind: str) -> dict[str, str]:
    out = {}
    if api_version:
        out["apiVersion"] = api_version
    if kind:
        out["kind"] = kind
    return out


@dataclass
class Image:
    image_id: str = ""
    names: list[str] = field(default_factory=list)
    digests: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Image:
        data = _object(data, "image")
        return cls(
            image_id=_string(data, "image_id", "image"),
            names=_string_list(data, "names", "image"),
            digests=_string_list(data, "digests", "image"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"image_id": self.image_id}
        if self.names:
            out["names"] = list(self.names)
        if self.digests:
            out["digests"] = list(self.digests)
        return out


@dataclass
class ImageJobStatus:
    """Pod counts and phase of an ImageJob."""

    failed: int = 0
    succeeded: int = 0
    desired: int = 0
    skipped: int = 0
    phase: JobPhase | str = ""
    delete_after: datetime.datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> ImageJobStatus:
        data = _object(data, "status")
        return cls(
            failed=_integer(data, "failed", "status"),
            succeeded=_integer(data, "succeeded", "status"),
            desired=_integer(data, "desired", "status"),
            skipped=_integer(data, "skipped", "status"),
            phase=_phase(data.get("phase")),
            delete_after=_parse_time(data.get("deleteAfter"), "status.deleteAfter"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "failed": self.failed,
            "succeeded": self.succeeded,
            "desired": self.desired,
            "skipped": self.skipped,
            "phase": str(self.phase),
        }
        if self.delete_after is not None:
            out["deleteAfter"] = _format_time(self.delete_after)
        return out


@dataclass
class ImageJob:
    status: ImageJobStatus = field(default_factory=ImageJobStatus)
    metadata: dict[str, Any] = field(default_factory=dict)
    api_version: str = ""
    kind: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ImageJob:
        data = _object(data, "ImageJob")
        return cls(
            status=ImageJobStatus.from_dict(data.get("status")),
            metadata=_metadata(data),
            api_version=_string(data, "apiVersion", "ImageJob"),
            kind=_string(data, "kind", "ImageJob"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = _type_meta(self.api_version, self.kind)
        out["metadata"] = dict(self.metadata)
        out["status"] = self.status.to_dict()
        return out


@dataclass
class ImageJobList:
    items: list[ImageJob] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    api_version: str = ""
    kind: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ImageJobList:
        data = _object(data, "ImageJobList")
        items = data.get("items") or []
        if not isinstance(items, list):
            raise ValueError("ImageJobList.items: expected a list")
        return cls(
            items=[ImageJob.from_dict(item) for item in items],
            metadata=_metadata(data),
            api_version=_string(data, "apiVersion", "ImageJobList"),
            kind=_string(data, "kind", "ImageJobList"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = _type_meta(self.api_version, self.kind)
        out["metadata"] = dict(self.metadata)
        out["items"] = [item.to_dict() for item in self.items]
        return out


@dataclass
class ImageListSpec:
    """The non-compliant images to delete when they are not running."""

    images: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> ImageListSpec:
        data = _object(data, "spec")
        return cls(images=_string_list(data, "images", "spec"))

    def to_dict(self) -> dict[str, Any]:
        return {"images": list(self.images)}


@dataclass
class ImageListStatus:
    timestamp: datetime.datetime | None = None
    success: int = 0
    failed: int = 0
    skipped: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ImageListStatus:
        data = _object(data, "status")
        return cls(
            timestamp=_parse_time(data.get("timestamp"), "status.timestamp"),
            success=_integer(data, "success", "status"),
            failed=_integer(data, "failed", "status"),
            skipped=_integer(data, "skipped", "status"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": _format_time(self.timestamp),
            "success": self.success,
            "failed": self.failed,
            "skipped": self.skipped,
        }


@dataclass
class ImageList:
    spec: ImageListSpec = field(default_factory=ImageListSpec)
    status: ImageListStatus = field(default_factory=ImageListStatus)
    metadata: dict[str, Any] = field(default_factory=dict)
    api_version: str = ""
    kind: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ImageList:
        data = _object(data, "ImageList")
        return cls(
            spec=ImageListSpec.from_dict(data.get("spec")),
            status=ImageListStatus.from_dict(data.get("status")),
            metadata=_metadata(data),
            api_version=_string(data, "apiVersion", "ImageList"),
            kind=_string(data, "kind", "ImageList"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = _type_meta(self.api_version, self.kind)
        out["metadata"] = dict(self.metadata)
        out["spec"] = self.spec.to_dict()
        out["status"] = self.status.to_dict()
        return out


@dataclass
class ImageListList:
    items: list[ImageList] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    api_version: str = ""
    kind: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ImageListList:
        data = _object(data, "ImageListList")
        items = data.get("items") or []
        if not isinstance(items, list):
            raise ValueError("ImageListList.items: expected a list")
        return cls(
            items=[ImageList.from_dict(item) for item in items],
            metadata=_metadata(data),
            api_version=_string(data, "apiVersion", "ImageListList"),
            kind=_string(data, "kind", "ImageListList"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = _type_meta(self.api_version, self.kind)
        out["metadata"] = dict(self.metadata)
        out["items"] = [item.to_dict() for item in self.items]
        return out