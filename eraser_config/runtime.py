"""Container runtime names and the socket addresses they are reached on."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

CONTAINERD_PATH = "/run/containerd/containerd.sock"
DOCKER_PATH = "/run/dockershim.sock"
CRIO_PATH = "/run/crio/crio.sock"

_VALID_SCHEMES = ("tcp", "unix")


class RuntimeConfigError(ValueError):
    """A runtime name or address is not acceptable."""


class Runtime(str, Enum):
    CONTAINERD = "containerd"
    DOCKERSHIM = "dockershim"
    CRIO = "crio"
    NOT_PROVIDED = ""

    def __str__(self) -> str:
        return self.value


_DEFAULT_PATHS = {
    Runtime.CONTAINERD: CONTAINERD_PATH,
    Runtime.DOCKERSHIM: DOCKER_PATH,
    Runtime.CRIO: CRIO_PATH,
}

_INVALID_RUNTIME = (
    f"invalid runtime: valid names are {Runtime.CONTAINERD}, {Runtime.DOCKERSHIM}, {Runtime.CRIO}"
)


def _as_runtime(value: Runtime | str) -> Runtime:
    try:
        return Runtime(value)
    except ValueError:
        raise RuntimeConfigError(_INVALID_RUNTIME) from None


@dataclass(frozen=True)
class RuntimeSpec:
    """A runtime together with the address of its socket."""

    name: Runtime = Runtime.NOT_PROVIDED
    address: str = ""

    @classmethod
    def from_dict(cls, data: object) -> RuntimeSpec:
        """Validate a decoded ``{"name": ..., "address": ...}`` mapping.

        A known name without an address gets that runtime's default socket;
        an empty name and address mean containerd at its default socket.
        """
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise RuntimeConfigError(f"error unmarshalling into RuntimeSpec: expected an object, got {data!r}")
        name = data.get("name") or ""
        address = data.get("address") or ""
        if not isinstance(name, str) or not isinstance(address, str):
            raise RuntimeConfigError(f"error unmarshalling into RuntimeSpec: name and address must be strings {data!r}")

        runtime = _as_runtime(name)
        if runtime is Runtime.NOT_PROVIDED:
            if address:
                raise RuntimeConfigError("runtime name must be provided with address")
            return convert_runtime_to_runtime_spec(Runtime.CONTAINERD)

        if not address:
            return convert_runtime_to_runtime_spec(runtime)

        try:
            scheme = urlsplit(address).scheme
        except ValueError as exc:
            raise RuntimeConfigError(str(exc)) from exc
        if scheme not in _VALID_SCHEMES:
            raise RuntimeConfigError(
                "invalid RuntimeAddress scheme: valid schemes for runtime socket address are `tcp` and `unix`"
            )
        return cls(name=runtime, address=address)

    @classmethod
    def from_json(cls, text: str | bytes) -> RuntimeSpec:
        """Parse and validate a JSON document describing a runtime."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise RuntimeConfigError(f"error unmarshalling into RuntimeSpec {exc} {text!r}") from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name.value, "address": self.address}


def convert_runtime_to_runtime_spec(runtime: Runtime | str) -> RuntimeSpec:
    """Return the runtime with its default ``unix://`` socket address."""
    resolved = _as_runtime(runtime)
    path = _DEFAULT_PATHS.get(resolved)
    if path is None:
        raise RuntimeConfigError(_INVALID_RUNTIME)
    return RuntimeSpec(name=resolved, address=f"unix://{path}")