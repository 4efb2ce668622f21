import pytest

from eraser_config.runtime import (
    CONTAINERD_PATH,
    CRIO_PATH,
    DOCKER_PATH,
    Runtime,
    RuntimeConfigError,
    RuntimeSpec,
    convert_runtime_to_runtime_spec,
)


@pytest.mark.parametrize(
    "runtime, expected",
    [
        (Runtime.CONTAINERD, RuntimeSpec(Runtime.CONTAINERD, f"unix://{CONTAINERD_PATH}")),
        (Runtime.DOCKERSHIM, RuntimeSpec(Runtime.DOCKERSHIM, f"unix://{DOCKER_PATH}")),
        (Runtime.CRIO, RuntimeSpec(Runtime.CRIO, f"unix://{CRIO_PATH}")),
    ],
    ids=["Containerd", "DockerShim", "Crio"],
)
def test_convert_runtime_to_runtime_spec(runtime, expected):
    assert convert_runtime_to_runtime_spec(runtime) == expected


def test_convert_invalid_runtime():
    with pytest.raises(RuntimeConfigError, match="invalid runtime"):
        convert_runtime_to_runtime_spec("invalid")


def test_convert_empty_runtime_is_invalid():
    with pytest.raises(RuntimeConfigError):
        convert_runtime_to_runtime_spec(Runtime.NOT_PROVIDED)


def test_convert_accepts_plain_string():
    assert convert_runtime_to_runtime_spec("crio") == RuntimeSpec(Runtime.CRIO, f"unix://{CRIO_PATH}")


@pytest.mark.parametrize(
    "text, expected",
    [
        (
            '{"name": "containerd", "address": "unix:///run/containerd/containerd.sock"}',
            RuntimeSpec(Runtime.CONTAINERD, f"unix://{CONTAINERD_PATH}"),
        ),
        (
            '{"name": "dockershim", "address": "unix:///run/dockershim.sock"}',
            RuntimeSpec(Runtime.DOCKERSHIM, f"unix://{DOCKER_PATH}"),
        ),
        (
            '{"name": "crio", "address": "unix:///run/crio/crio.sock"}',
            RuntimeSpec(Runtime.CRIO, f"unix://{CRIO_PATH}"),
        ),
    ],
    ids=["ValidContainerd", "ValidDockerShim", "ValidCrio"],
)
def test_from_json_valid(text, expected):
    assert RuntimeSpec.from_json(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        '{"name": "invalid", "address": "unix:///invalid"}',
        '{"name": "containerd", "address": "http://invalid"}',
    ],
    ids=["InvalidName", "InvalidAddressScheme"],
)
def test_from_json_invalid(text):
    with pytest.raises(RuntimeConfigError):
        RuntimeSpec.from_json(text)


def test_scheme_error_message():
    with pytest.raises(RuntimeConfigError, match="invalid RuntimeAddress scheme"):
        RuntimeSpec.from_dict({"name": "crio", "address": "http://invalid"})


def test_tcp_address_kept():
    spec = RuntimeSpec.from_dict({"name": "containerd", "address": "tcp://localhost:2375"})
    assert spec == RuntimeSpec(Runtime.CONTAINERD, "tcp://localhost:2375")


def test_custom_unix_address_kept():
    spec = RuntimeSpec.from_dict({"name": "containerd", "address": "unix:///fake/socket/address.sock"})
    assert spec.address == "unix:///fake/socket/address.sock"


def test_name_without_address_gets_default():
    assert RuntimeSpec.from_dict({"name": "dockershim"}) == convert_runtime_to_runtime_spec(Runtime.DOCKERSHIM)


def test_empty_spec_defaults_to_containerd():
    assert RuntimeSpec.from_json("{}") == RuntimeSpec(Runtime.CONTAINERD, f"unix://{CONTAINERD_PATH}")
    assert RuntimeSpec.from_json("null") == RuntimeSpec(Runtime.CONTAINERD, f"unix://{CONTAINERD_PATH}")


def test_address_without_name_rejected():
    with pytest.raises(RuntimeConfigError, match="runtime name must be provided"):
        RuntimeSpec.from_dict({"name": "", "address": "unix:///run/crio/crio.sock"})


def test_non_string_fields_rejected():
    with pytest.raises(RuntimeConfigError):
        RuntimeSpec.from_dict({"name": 5, "address": ""})


def test_non_object_rejected():
    with pytest.raises(RuntimeConfigError):
        RuntimeSpec.from_json('["containerd"]')


def test_malformed_json_rejected():
    with pytest.raises(RuntimeConfigError):
        RuntimeSpec.from_json("{not json")


def test_to_dict_round_trip():
    spec = RuntimeSpec(Runtime.CRIO, "tcp://localhost:1234")
    assert RuntimeSpec.from_dict(spec.to_dict()) == spec
    assert spec.to_dict() == {"name": "crio", "address": "tcp://localhost:1234"}


def test_runtime_error_is_value_error():
    with pytest.raises(ValueError):
        convert_runtime_to_runtime_spec("podman")