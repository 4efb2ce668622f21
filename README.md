# eraser-config

Configuration and resource models for a cluster image-cleanup controller.
The package parses, validates, converts and produces default configurations,
using only the standard library.

## Modules

- `eraser_config.duration`: `Duration`, a frozen dataclass holding whole
  nanoseconds, with `from_json`, `to_json` and `to_timedelta`.
  `parse_duration` turns strings such as `"1h30m"` or `"-1.5ms"` into
  nanoseconds; `format_duration` renders nanoseconds as `"24h0m0s"`,
  `"1.5ms"` and so on. Malformed strings raise `ValueError`.
- `eraser_config.runtime`: the `Runtime` enum (`containerd`, `dockershim`,
  `crio`, and the empty "not provided" value), `RuntimeSpec` (a name and a
  socket address) and `convert_runtime_to_runtime_spec`, which gives a runtime
  its default `unix://` socket. `RuntimeSpec.from_dict` / `from_json` accept
  only `tcp` and `unix` addresses, fill in the default socket when the address
  is missing, and treat an empty name and address as containerd. Invalid
  input raises `RuntimeConfigError` (a `ValueError`).
- `eraser_config.types`: the current `EraserConfig` document and its parts
  (`ManagerConfig`, `Components`, `ContainerConfig`,
  `OptionalContainerConfig`, `RepoTag`, `ResourceRequirements`,
  `ScheduleConfig`, `ProfileConfig`, `ImageJobConfig`,
  `ImageJobCleanupConfig`, `NodeFilterConfig`) and `GroupVersion`.
  `EraserConfig.from_dict`, `to_dict`, `from_json` and `to_json` read and
  write the camel-case JSON form; empty values are left out on output.
  Resource quantities are kept as strings such as `"25Mi"` or `"7m"` and are
  checked against the quantity syntax.
- `eraser_config.jobs`: the `ImageJob`, `ImageJobList`, `ImageList` and
  `ImageListList` resources, with `JobPhase`, `Image`, `ImageJobStatus`,
  `ImageListSpec` and `ImageListStatus`. Times are read and written as
  RFC 3339 strings.
- `eraser_config.legacy`: `LegacyEraserConfig` for documents of the
  `v1alpha1` and `v1alpha2` versions, where the runtime is a bare name and
  `v1alpha1` calls the remover component `eraser`. It converts with
  `to_unversioned` and `from_unversioned`. Helpers: `parse_legacy_runtime`,
  `runtime_to_spec`, `spec_to_runtime`.
- `eraser_config.defaults`: `default_config`, `default_legacy_config`,
  `image_repo`, the scanner config text constants, and `ConfigManager`, which
  holds the live configuration behind a lock and hands out deep copies.
  `read` and `update` raise `RuntimeError` when the manager holds no
  configuration; `update(None)` raises `ValueError`.

## Installing

```
pip install .
```

## Example

```python
from eraser_config.runtime import RuntimeSpec, convert_runtime_to_runtime_spec
from eraser_config.defaults import ConfigManager, default_config

spec = convert_runtime_to_runtime_spec("crio")
print(spec.address)            # unix:///run/crio/crio.sock

parsed = RuntimeSpec.from_json('{"name": "containerd", "address": "tcp://localhost:1234"}')

config = default_config("v1.4.0-beta.0", "registry.example.com/eraser")
print(config.components.remover.image.repo)   # registry.example.com/eraser/remover

manager = ConfigManager(config)
current = manager.read()
print(current.manager.scheduling.repeat_interval.to_json())   # 24h0m0s
```

## What it does not do

The package only models and validates configuration and resource documents.
It does not talk to a cluster or a container runtime, remove or scan images,
schedule jobs, read YAML, or provide a command-line tool.

## Running the tests

```
pip install .[test]
pytest
```