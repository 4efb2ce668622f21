"""The EraserConfig document and the settings it is built from."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from .duration import Duration
from .runtime import RuntimeSpec

GROUP = "eraser.sh"
KIND = "EraserConfig"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    @property
    def api_version(self) -> str:
        """The ``group/version`` string used as ``apiVersion``."""
        return f"{self.group}/{self.version}" if self.group else self.version

    def __str__(self) -> str:
        return self.api_version


UNVERSIONED = GroupVersion(GROUP, "unversioned")
V1ALPHA3 = GroupVersion(GROUP, "v1alpha3")

_QUANTITY = re.compile(
    r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+|[KMGTPE]i|[numkMGTPE])?$"
)


def _object(value: Any, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected an object, got {type(value).__name__}")
    return value


def _string(data: dict, key: str, where: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{where}.{key}: expected a string, got {type(value).__name__}")
    return value


def _boolean(data: dict, key: str, where: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{where}.{key}: expected a boolean, got {type(value).__name__}")
    return value


def _integer(data: dict, key: str, where: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{where}.{key}: expected an integer, got {value!r}")
    return value


def _number(data: dict, key: str, where: str) -> float:
    value = data.get(key)
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where}.{key}: expected a number, got {value!r}")
    return float(value)


def _string_list(data: dict, key: str, where: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"{where}.{key}: expected a list of strings")
    return list(value)


def _string_map(data: dict, key: str, where: str) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict) or not all(isinstance(v, str) for v in value.values()):
        raise ValueError(f"{where}.{key}: expected a mapping of strings")
    return dict(value)


def _duration(data: dict, key: str, where: str) -> Duration:
    if key not in data:
        return Duration()
    try:
        return Duration.from_json(data[key])
    except ValueError as exc:
        raise ValueError(f"{where}.{key}: {exc}") from exc


def _quantity(value: Any, where: str) -> str:
    if value is None:
        return "0"
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ValueError(f"{where}: expected a quantity, got {value!r}")
    text = str(value).strip()
    if not _QUANTITY.match(text):
        raise ValueError(f"{where}: quantities must match the regular expression {_QUANTITY.pattern!r}")
    return text


@dataclass
class RepoTag:
    repo: str = ""
    tag: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> RepoTag:
        data = _object(data, "image")
        return cls(repo=_string(data, "repo", "image"), tag=_string(data, "tag", "image"))

    def to_dict(self) -> dict[str, str]:
        out = {}
        if self.repo:
            out["repo"] = self.repo
        if self.tag:
            out["tag"] = self.tag
        return out


@dataclass
class ResourceRequirements:
    """Memory and CPU quantities such as ``"25Mi"`` and ``"7m"``."""

    mem: str = "0"
    cpu: str = "0"

    def __post_init__(self) -> None:
        self.mem = _quantity(self.mem, "mem")
        self.cpu = _quantity(self.cpu, "cpu")

    @classmethod
    def from_dict(cls, data: Any) -> ResourceRequirements:
        data = _object(data, "resources")
        return cls(mem=_quantity(data.get("mem"), "mem"), cpu=_quantity(data.get("cpu"), "cpu"))

    def to_dict(self) -> dict[str, str]:
        return {"mem": self.mem, "cpu": self.cpu}


@dataclass
class ContainerConfig:
    image: RepoTag = field(default_factory=RepoTag)
    request: ResourceRequirements = field(default_factory=ResourceRequirements)
    limit: ResourceRequirements = field(default_factory=ResourceRequirements)
    config: str | None = None

    @staticmethod
    def _fields(data: dict, where: str) -> dict[str, Any]:
        config = data.get("config")
        if config is not None and not isinstance(config, str):
            raise ValueError(f"{where}.config: expected a string")
        return {
            "image": RepoTag.from_dict(data.get("image")),
            "request": ResourceRequirements.from_dict(data.get("request")),
            "limit": ResourceRequirements.from_dict(data.get("limit")),
            "config": config,
        }

    @classmethod
    def from_dict(cls, data: Any) -> ContainerConfig:
        return cls(**ContainerConfig._fields(_object(data, "container"), "container"))

    def _container_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "image": self.image.to_dict(),
            "request": self.request.to_dict(),
            "limit": self.limit.to_dict(),
        }
        if self.config is not None:
            out["config"] = self.config
        return out

    def to_dict(self) -> dict[str, Any]:
        return self._container_dict()


@dataclass
class OptionalContainerConfig(ContainerConfig):
    """A container that can be switched on or off; its settings sit inline."""

    enabled: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> OptionalContainerConfig:
        data = _object(data, "container")
        return cls(
            enabled=_boolean(data, "enabled", "container"),
            **ContainerConfig._fields(data, "container"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.enabled:
            out["enabled"] = True
        out.update(self._container_dict())
        return out


@dataclass
class ScheduleConfig:
    repeat_interval: Duration = field(default_factory=Duration)
    begin_immediately: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> ScheduleConfig:
        data = _object(data, "scheduling")
        return cls(
            repeat_interval=_duration(data, "repeatInterval", "scheduling"),
            begin_immediately=_boolean(data, "beginImmediately", "scheduling"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.repeat_interval.nanoseconds:
            out["repeatInterval"] = self.repeat_interval.to_json()
        if self.begin_immediately:
            out["beginImmediately"] = True
        return out


@dataclass
class ProfileConfig:
    enabled: bool = False
    port: int = 0

    @classmethod
    def from_dict(cls, data: Any) -> ProfileConfig:
        data = _object(data, "profile")
        return cls(enabled=_boolean(data, "enabled", "profile"), port=_integer(data, "port", "profile"))

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.enabled:
            out["enabled"] = True
        if self.port:
            out["port"] = self.port
        return out


@dataclass
class ImageJobCleanupConfig:
    delay_on_success: Duration = field(default_factory=Duration)
    delay_on_failure: Duration = field(default_factory=Duration)

    @classmethod
    def from_dict(cls, data: Any) -> ImageJobCleanupConfig:
        data = _object(data, "cleanup")
        return cls(
            delay_on_success=_duration(data, "delayOnSuccess", "cleanup"),
            delay_on_failure=_duration(data, "delayOnFailure", "cleanup"),
        )

    def to_dict(self) -> dict[str, str]:
        out = {}
        if self.delay_on_success.nanoseconds:
            out["delayOnSuccess"] = self.delay_on_success.to_json()
        if self.delay_on_failure.nanoseconds:
            out["delayOnFailure"] = self.delay_on_failure.to_json()
        return out


@dataclass
class ImageJobConfig:
    success_ratio: float = 0.0
    cleanup: ImageJobCleanupConfig = field(default_factory=ImageJobCleanupConfig)

    @classmethod
    def from_dict(cls, data: Any) -> ImageJobConfig:
        data = _object(data, "imageJob")
        return cls(
            success_ratio=_number(data, "successRatio", "imageJob"),
            cleanup=ImageJobCleanupConfig.from_dict(data.get("cleanup")),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.success_ratio:
            out["successRatio"] = self.success_ratio
        out["cleanup"] = self.cleanup.to_dict()
        return out


@dataclass
class NodeFilterConfig:
    type: str = ""
    selectors: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> NodeFilterConfig:
        data = _object(data, "nodeFilter")
        return cls(
            type=_string(data, "type", "nodeFilter"),
            selectors=_string_list(data, "selectors", "nodeFilter"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.type:
            out["type"] = self.type
        if self.selectors:
            out["selectors"] = list(self.selectors)
        return out


@dataclass
class ManagerConfig:
    runtime: RuntimeSpec = field(default_factory=RuntimeSpec)
    otlp_endpoint: str = ""
    log_level: str = ""
    scheduling: ScheduleConfig = field(default_factory=ScheduleConfig)
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    image_job: ImageJobConfig = field(default_factory=ImageJobConfig)
    pull_secrets: list[str] = field(default_factory=list)
    node_filter: NodeFilterConfig = field(default_factory=NodeFilterConfig)
    priority_class_name: str = ""
    additional_pod_labels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> ManagerConfig:
        data = _object(data, "manager")
        runtime = RuntimeSpec.from_dict(data["runtime"]) if "runtime" in data else RuntimeSpec()
        return cls(
            runtime=runtime,
            otlp_endpoint=_string(data, "otlpEndpoint", "manager"),
            log_level=_string(data, "logLevel", "manager"),
            scheduling=ScheduleConfig.from_dict(data.get("scheduling")),
            profile=ProfileConfig.from_dict(data.get("profile")),
            image_job=ImageJobConfig.from_dict(data.get("imageJob")),
            pull_secrets=_string_list(data, "pullSecrets", "manager"),
            node_filter=NodeFilterConfig.from_dict(data.get("nodeFilter")),
            priority_class_name=_string(data, "priorityClassName", "manager"),
            additional_pod_labels=_string_map(data, "additionalPodLabels", "manager"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"runtime": self.runtime.to_dict()}
        if self.otlp_endpoint:
            out["otlpEndpoint"] = self.otlp_endpoint
        if self.log_level:
            out["logLevel"] = self.log_level
        out["scheduling"] = self.scheduling.to_dict()
        out["profile"] = self.profile.to_dict()
        out["imageJob"] = self.image_job.to_dict()
        if self.pull_secrets:
            out["pullSecrets"] = list(self.pull_secrets)
        out["nodeFilter"] = self.node_filter.to_dict()
        if self.priority_class_name:
            out["priorityClassName"] = self.priority_class_name
        if self.additional_pod_labels:
            out["additionalPodLabels"] = dict(self.additional_pod_labels)
        return out


@dataclass
class Components:
    collector: OptionalContainerConfig = field(default_factory=OptionalContainerConfig)
    scanner: OptionalContainerConfig = field(default_factory=OptionalContainerConfig)
    remover: ContainerConfig = field(default_factory=ContainerConfig)

    @classmethod
    def from_dict(cls, data: Any) -> Components:
        data = _object(data, "components")
        return cls(
            collector=OptionalContainerConfig.from_dict(data.get("collector")),
            scanner=OptionalContainerConfig.from_dict(data.get("scanner")),
            remover=ContainerConfig.from_dict(data.get("remover")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "collector": self.collector.to_dict(),
            "scanner": self.scanner.to_dict(),
            "remover": self.remover.to_dict(),
        }


@dataclass
class EraserConfig:
    """The configuration read by the eraser manager."""

    manager: ManagerConfig = field(default_factory=ManagerConfig)
    components: Components = field(default_factory=Components)
    api_version: str = ""
    kind: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> EraserConfig:
        data = _object(data, "config")
        return cls(
            manager=ManagerConfig.from_dict(data.get("manager")),
            components=Components.from_dict(data.get("components")),
            api_version=_string(data, "apiVersion", "config"),
            kind=_string(data, "kind", "config"),
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.api_version:
            out["apiVersion"] = self.api_version
        if self.kind:
            out["kind"] = self.kind
        out["manager"] = self.manager.to_dict()
        out["components"] = self.components.to_dict()
        return out

    @classmethod
    def from_json(cls, text: str | bytes) -> EraserConfig:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ValueError(f"invalid EraserConfig JSON: {exc}") from exc
        return cls.from_dict(data)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())