"""EraserConfig documents of the v1alpha1 and v1alpha2 API versions.

These versions name the runtime by a bare string instead of a name and
socket address, carry no extra pod labels, and v1alpha1 calls the remover
component ``eraser``.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from .jobs import V1ALPHA1
from .runtime import Runtime, RuntimeConfigError, RuntimeSpec, convert_runtime_to_runtime_spec
from .types import (
    GROUP,
    KIND,
    UNVERSIONED,
    Components,
    ContainerConfig,
    EraserConfig,
    GroupVersion,
    ImageJobConfig,
    ManagerConfig,
    NodeFilterConfig,
    OptionalContainerConfig,
    ProfileConfig,
    ScheduleConfig,
    _object,
    _string,
    _string_list,
)

V1ALPHA2 = GroupVersion(GROUP, "v1alpha2")

_VERSIONS = {V1ALPHA1.version: V1ALPHA1, V1ALPHA2.version: V1ALPHA2}
_LEGACY_RUNTIMES = (Runtime.CONTAINERD, Runtime.DOCKERSHIM, Runtime.CRIO)


def _resolve_version(api_version: GroupVersion | str) -> GroupVersion:
    text = api_version.api_version if isinstance(api_version, GroupVersion) else api_version
    if isinstance(text, str):
        group, _, version = text.rpartition("/")
        if group in ("", GROUP) and version in _VERSIONS:
            return _VERSIONS[version]
    raise ValueError(
        f"unsupported EraserConfig version {api_version!r}: expected {V1ALPHA1} or {V1ALPHA2}"
    )


def _remover_key(version: GroupVersion) -> str:
    return "eraser" if version == V1ALPHA1 else "remover"


def parse_legacy_runtime(value: Any) -> Runtime:
    """Validate a runtime given by name, as the legacy versions store it."""
    if isinstance(value, Runtime):
        text = value.value
    elif isinstance(value, str):
        text = value
    else:
        raise RuntimeConfigError(f"runtime must be a JSON string, got {value!r}")
    for runtime in _LEGACY_RUNTIMES:
        if runtime.value == text:
            return runtime
    raise RuntimeConfigError(
        f"cannot determine runtime type: {text}. valid values are containerd, dockershim, or crio"
    )


def runtime_to_spec(runtime: Runtime | str) -> RuntimeSpec:
    """Give a runtime name its default socket address."""
    return convert_runtime_to_runtime_spec(runtime)


def spec_to_runtime(spec: RuntimeSpec) -> Runtime:
    """Keep only the name of a runtime spec; its address is dropped."""
    return spec.name


@dataclass
class LegacyEraserConfig:
    """An EraserConfig as written in the v1alpha1 or v1alpha2 API."""

    version: GroupVersion = V1ALPHA2
    runtime: Runtime = Runtime.NOT_PROVIDED
    otlp_endpoint: str = ""
    log_level: str = ""
    scheduling: ScheduleConfig = field(default_factory=ScheduleConfig)
    profile: ProfileConfig = field(default_factory=ProfileConfig)
    image_job: ImageJobConfig = field(default_factory=ImageJobConfig)
    pull_secrets: list[str] = field(default_factory=list)
    node_filter: NodeFilterConfig = field(default_factory=NodeFilterConfig)
    priority_class_name: str = ""
    components: Components = field(default_factory=Components)
    kind: str = KIND

    @property
    def api_version(self) -> str:
        return self.version.api_version

    @classmethod
    def from_dict(cls, data: Any, api_version: GroupVersion | str | None = None) -> LegacyEraserConfig:
        """Read a decoded document; the version comes from the argument or ``apiVersion``."""
        data = _object(data, "config")
        declared = _string(data, "apiVersion", "config")
        if api_version is None:
            if not declared:
                raise ValueError("config: apiVersion is required when no version is given")
            version = _resolve_version(declared)
        else:
            version = _resolve_version(api_version)
            if declared and _resolve_version(declared) != version:
                raise ValueError(
                    f"config: apiVersion {declared!r} does not match {version.api_version!r}"
                )

        manager = _object(data.get("manager"), "manager")
        runtime = parse_legacy_runtime(manager["runtime"]) if "runtime" in manager else Runtime.NOT_PROVIDED
        components = _object(data.get("components"), "components")

        return cls(
            version=version,
            runtime=runtime,
            otlp_endpoint=_string(manager, "otlpEndpoint", "manager"),
            log_level=_string(manager, "logLevel", "manager"),
            scheduling=ScheduleConfig.from_dict(manager.get("scheduling")),
            profile=ProfileConfig.from_dict(manager.get("profile")),
            image_job=ImageJobConfig.from_dict(manager.get("imageJob")),
            pull_secrets=_string_list(manager, "pullSecrets", "manager"),
            node_filter=NodeFilterConfig.from_dict(manager.get("nodeFilter")),
            priority_class_name=_string(manager, "priorityClassName", "manager"),
            components=Components(
                collector=OptionalContainerConfig.from_dict(components.get("collector")),
                scanner=OptionalContainerConfig.from_dict(components.get("scanner")),
                remover=ContainerConfig.from_dict(components.get(_remover_key(version))),
            ),
            kind=_string(data, "kind", "config") or KIND,
        )

    def to_dict(self) -> dict[str, Any]:
        manager: dict[str, Any] = {}
        if self.runtime.value:
            manager["runtime"] = self.runtime.value
        if self.otlp_endpoint:
            manager["otlpEndpoint"] = self.otlp_endpoint
        if self.log_level:
            manager["logLevel"] = self.log_level
        manager["scheduling"] = self.scheduling.to_dict()
        manager["profile"] = self.profile.to_dict()
        manager["imageJob"] = self.image_job.to_dict()
        if self.pull_secrets:
            manager["pullSecrets"] = list(self.pull_secrets)
        manager["nodeFilter"] = self.node_filter.to_dict()
        if self.priority_class_name:
            manager["priorityClassName"] = self.priority_class_name

        out: dict[str, Any] = {"apiVersion": self.api_version}
        if self.kind:
            out["kind"] = self.kind
        out["manager"] = manager
        out["components"] = {
            "collector": self.components.collector.to_dict(),
            "scanner": self.components.scanner.to_dict(),
            _remover_key(self.version): self.components.remover.to_dict(),
        }
        return out

    def to_unversioned(self) -> EraserConfig:
        """Convert to the current configuration; the runtime gets its default socket."""
        return EraserConfig(
            manager=ManagerConfig(
                runtime=runtime_to_spec(self.runtime),
                otlp_endpoint=self.otlp_endpoint,
                log_level=self.log_level,
                scheduling=copy.deepcopy(self.scheduling),
                profile=copy.deepcopy(self.profile),
                image_job=copy.deepcopy(self.image_job),
                pull_secrets=list(self.pull_secrets),
                node_filter=copy.deepcopy(self.node_filter),
                priority_class_name=self.priority_class_name,
                additional_pod_labels={},
            ),
            components=copy.deepcopy(self.components),
            api_version=UNVERSIONED.api_version,
            kind=self.kind,
        )

    @classmethod
    def from_unversioned(cls, config: EraserConfig, api_version: GroupVersion | str) -> LegacyEraserConfig:
        """Convert from the current configuration, dropping what the version cannot hold."""
        manager = config.manager
        return cls(
            version=_resolve_version(api_version),
            runtime=spec_to_runtime(manager.runtime),
            otlp_endpoint=manager.otlp_endpoint,
            log_level=manager.log_level,
            scheduling=copy.deepcopy(manager.scheduling),
            profile=copy.deepcopy(manager.profile),
            image_job=copy.deepcopy(manager.image_job),
            pull_secrets=list(manager.pull_secrets),
            node_filter=copy.deepcopy(manager.node_filter),
            priority_class_name=manager.priority_class_name,
            components=copy.deepcopy(config.components),
            kind=config.kind or KIND,
        )