import threading

import pytest

from eraser_config.defaults import (
    DEFAULT_SCANNER_CONFIG,
    LEGACY_SCANNER_CONFIG,
    ConfigManager,
    default_config,
    default_legacy_config,
    image_repo,
)
from eraser_config.duration import HOUR, Duration
from eraser_config.legacy import LegacyEraserConfig
from eraser_config.runtime import Runtime, RuntimeSpec
from eraser_config.types import EraserConfig


def test_image_repo_without_default_repo():
    assert image_repo("collector", "") == "collector"


def test_image_repo_with_default_repo():
    assert image_repo("remover", "ghcr.io/eraser-dev") == "ghcr.io/eraser-dev/remover"


def test_default_manager_settings():
    cfg = default_config()
    manager = cfg.manager
    assert manager.runtime == RuntimeSpec(Runtime.CONTAINERD, "unix:///run/containerd/containerd.sock")
    assert manager.log_level == "info"
    assert manager.otlp_endpoint == ""
    assert manager.scheduling.repeat_interval == Duration(24 * HOUR)
    assert manager.scheduling.begin_immediately is True
    assert manager.profile.enabled is False
    assert manager.profile.port == 6060
    assert manager.image_job.success_ratio == 1.0
    assert manager.image_job.cleanup.delay_on_success == Duration(0)
    assert manager.image_job.cleanup.delay_on_failure == Duration(24 * HOUR)
    assert manager.pull_secrets == []
    assert manager.node_filter.type == "exclude"
    assert manager.node_filter.selectors == ["eraser.sh/cleanup.filter"]
    assert manager.additional_pod_labels == {}


def test_default_components():
    cfg = default_config("v1.4.0-beta.0", "ghcr.io/eraser-dev")
    comps = cfg.components
    assert comps.collector.enabled is False
    assert comps.collector.image.repo == "ghcr.io/eraser-dev/collector"
    assert comps.collector.image.tag == "v1.4.0-beta.0"
    assert comps.collector.request.mem == "25Mi"
    assert comps.collector.request.cpu == "7m"
    assert comps.collector.limit.mem == "500Mi"
    assert comps.collector.config is None
    assert comps.scanner.image.repo == "ghcr.io/eraser-dev/eraser-trivy-scanner"
    assert comps.scanner.request.cpu == "1000m"
    assert comps.scanner.limit.mem == "2Gi"
    assert comps.scanner.limit.cpu == "1500m"
    assert comps.scanner.config == DEFAULT_SCANNER_CONFIG
    assert comps.remover.image.repo == "ghcr.io/eraser-dev/remover"
    assert comps.remover.limit.mem == "30Mi"
    assert comps.remover.config is None


def test_scanner_config_texts():
    current = default_config().components.scanner.config
    legacy = default_legacy_config("v1alpha1").components.scanner.config
    assert "ignoredStatuses:" in current
    assert "ignoredStatuses:" not in legacy
    assert "dbRepo: ghcr.io/aquasecurity/trivy-db" in legacy


def test_default_config_round_trips_through_json():
    cfg = default_config("v1.4.0-beta.0")
    assert EraserConfig.from_json(cfg.to_json()) == cfg


def test_default_configs_are_independent():
    first = default_config()
    first.manager.node_filter.selectors.append("other")
    assert default_config().manager.node_filter.selectors == ["eraser.sh/cleanup.filter"]


def test_v1alpha1_default_uses_eraser_component():
    cfg = default_legacy_config("v1alpha1")
    assert cfg.runtime is Runtime.CONTAINERD
    assert cfg.components.remover.image.repo == "eraser"
    assert cfg.components.scanner.config == LEGACY_SCANNER_CONFIG
    assert "eraser" in cfg.to_dict()["components"]


def test_v1alpha2_default_uses_remover_component():
    cfg = default_legacy_config("eraser.sh/v1alpha2", "v1.4.0-beta.0", "ghcr.io/eraser-dev")
    assert cfg.components.remover.image.repo == "ghcr.io/eraser-dev/remover"
    assert cfg.components.remover.image.tag == "v1.4.0-beta.0"
    assert "remover" in cfg.to_dict()["components"]


@pytest.mark.parametrize("version", ["v1alpha1", "v1alpha2"])
def test_legacy_default_round_trips(version):
    cfg = default_legacy_config(version)
    assert LegacyEraserConfig.from_dict(cfg.to_dict()) == cfg


def test_legacy_default_converts_to_default_runtime_spec():
    unversioned = default_legacy_config("v1alpha2").to_unversioned()
    assert unversioned.manager.runtime == default_config().manager.runtime
    assert unversioned.manager.scheduling == default_config().manager.scheduling


@pytest.mark.parametrize("version", ["v1alpha3", "v1", "bogus"])
def test_legacy_default_rejects_other_versions(version):
    with pytest.raises(ValueError):
        default_legacy_config(version)


def test_manager_read_without_config_fails():
    with pytest.raises(RuntimeError, match="configuration is nil"):
        ConfigManager().read()


def test_manager_update_without_config_fails():
    with pytest.raises(RuntimeError, match="configuration is nil"):
        ConfigManager().update(default_config())


def test_manager_update_with_none_fails():
    manager = ConfigManager(default_config())
    with pytest.raises(ValueError, match="new configuration is nil"):
        manager.update(None)


def test_manager_read_returns_copy():
    manager = ConfigManager(default_config())
    cfg = manager.read()
    cfg.manager.log_level = "debug"
    assert manager.read().manager.log_level == "info"


def test_manager_update_replaces_config():
    manager = ConfigManager(default_config())
    new = default_config()
    new.manager.log_level = "debug"
    manager.update(new)
    new.manager.log_level = "error"
    assert manager.read().manager.log_level == "debug"


def test_manager_concurrent_updates_leave_valid_config():
    manager = ConfigManager(default_config())
    levels = ["debug", "warn", "error"]

    def worker(level):
        cfg = default_config()
        cfg.manager.log_level = level
        for _ in range(50):
            manager.update(cfg)
            manager.read()

    threads = [threading.Thread(target=worker, args=(level,)) for level in levels]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert manager.read().manager.log_level in levels