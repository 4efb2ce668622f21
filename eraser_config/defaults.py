"""Built-in EraserConfig defaults and a lock-guarded holder for the live config."""

from __future__ import annotations

import copy
import threading

from .duration import HOUR, Duration
from .legacy import LegacyEraserConfig, _resolve_version
from .jobs import V1ALPHA1
from .runtime import Runtime, RuntimeSpec
from .types import (
    Components,
    ContainerConfig,
    EraserConfig,
    GroupVersion,
    ImageJobCleanupConfig,
    ImageJobConfig,
    ManagerConfig,
    NodeFilterConfig,
    OptionalContainerConfig,
    ProfileConfig,
    RepoTag,
    ResourceRequirements,
    ScheduleConfig,
)

_SCANNER_CONFIG_BODY = """
cacheDir: /var/lib/trivy
dbRepo: ghcr.io/aquasecurity/trivy-db
deleteFailedImages: true
deleteEOLImages: true
vulnerabilities:
  ignoreUnfixed: false
  types:
    - os
    - library
securityChecks: # need to be documented; determined by trivy, not us
  - vuln
severities:
  - CRITICAL
  - HIGH
  - MEDIUM
  - LOW
"""

DEFAULT_SCANNER_CONFIG = _SCANNER_CONFIG_BODY + "ignoredStatuses:\n"
LEGACY_SCANNER_CONFIG = _SCANNER_CONFIG_BODY

DEFAULT_RUNTIME_ADDRESS = "unix:///run/containerd/containerd.sock"
DEFAULT_NODE_FILTER_SELECTOR = "eraser.sh/cleanup.filter"

_NO_DELAY = Duration(0)
_ONE_DAY = Duration(24 * HOUR)


def image_repo(basename: str, default_repo: str = "") -> str:
    """Prefix ``basename`` with the default repository, if there is one."""
    if not default_repo:
        return basename
    return f"{default_repo}/{basename}"


def _default_schedule() -> ScheduleConfig:
    return ScheduleConfig(repeat_interval=_ONE_DAY, begin_immediately=True)


def _default_profile() -> ProfileConfig:
    return ProfileConfig(enabled=False, port=6060)


def _default_image_job() -> ImageJobConfig:
    return ImageJobConfig(
        success_ratio=1.0,
        cleanup=ImageJobCleanupConfig(delay_on_success=_NO_DELAY, delay_on_failure=_ONE_DAY),
    )


def _default_node_filter() -> NodeFilterConfig:
    return NodeFilterConfig(type="exclude", selectors=[DEFAULT_NODE_FILTER_SELECTOR])


def _default_components(
    remover_basename: str, scanner_config: str, build_version: str, default_repo: str
) -> Components:
    return Components(
        collector=OptionalContainerConfig(
            enabled=False,
            image=RepoTag(repo=image_repo("collector", default_repo), tag=build_version),
            request=ResourceRequirements(mem="25Mi", cpu="7m"),
            limit=ResourceRequirements(mem="500Mi", cpu="0"),
            config=None,
        ),
        scanner=OptionalContainerConfig(
            enabled=False,
            image=RepoTag(repo=image_repo("eraser-trivy-scanner", default_repo), tag=build_version),
            request=ResourceRequirements(mem="500Mi", cpu="1000m"),
            limit=ResourceRequirements(mem="2Gi", cpu="1500m"),
            config=scanner_config,
        ),
        remover=ContainerConfig(
            image=RepoTag(repo=image_repo(remover_basename, default_repo), tag=build_version),
            request=ResourceRequirements(mem="25Mi", cpu="7m"),
            limit=ResourceRequirements(mem="30Mi", cpu="0"),
            config=None,
        ),
    )


def default_config(build_version: str = "", default_repo: str = "") -> EraserConfig:
    """Return the built-in configuration used when none is supplied."""
    return EraserConfig(
        manager=ManagerConfig(
            runtime=RuntimeSpec(name=Runtime.CONTAINERD, address=DEFAULT_RUNTIME_ADDRESS),
            otlp_endpoint="",
            log_level="info",
            scheduling=_default_schedule(),
            profile=_default_profile(),
            image_job=_default_image_job(),
            pull_secrets=[],
            node_filter=_default_node_filter(),
            priority_class_name="",
            additional_pod_labels={},
        ),
        components=_default_components("remover", DEFAULT_SCANNER_CONFIG, build_version, default_repo),
    )


def default_legacy_config(
    api_version: GroupVersion | str, build_version: str = "", default_repo: str = ""
) -> LegacyEraserConfig:
    """Return the built-in configuration as written in v1alpha1 or v1alpha2."""
    version = _resolve_version(api_version)
    remover_basename = "eraser" if version == V1ALPHA1 else "remover"
    return LegacyEraserConfig(
        version=version,
        runtime=Runtime.CONTAINERD,
        otlp_endpoint="",
        log_level="info",
        scheduling=_default_schedule(),
        profile=_default_profile(),
        image_job=_default_image_job(),
        pull_secrets=[],
        node_filter=_default_node_filter(),
        priority_class_name="",
        components=_default_components(
            remover_basename, LEGACY_SCANNER_CONFIG, build_version, default_repo
        ),
    )


class ConfigManager:
    """Holds the live configuration and hands out copies under a lock."""

    def __init__(self, config: EraserConfig | None = None) -> None:
        self._lock = threading.Lock()
        self._config = config

    def read(self) -> EraserConfig:
        """Return a copy of the current configuration."""
        with self._lock:
            if self._config is None:
                raise RuntimeError("ConfigManager configuration is nil, aborting")
            return copy.deepcopy(self._config)

    def update(self, config: EraserConfig | None) -> None:
        """Replace the current configuration with a copy of ``config``."""
        with self._lock:
            if self._config is None:
                raise RuntimeError("ConfigManager configuration is nil, aborting")
            if config is None:
                raise ValueError("new configuration is nil, aborting")
            self._config = copy.deepcopy(config)