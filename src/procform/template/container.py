# Copyright 2025 iGenius S.p.A
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from collections.abc import Mapping, Sequence
import copy
from typing import Any

from procform.models.app import Process
from procform.template.graph import TASK_DEFINITION, Resource

MB = 1024 * 1024


def memory_mb(memory_limit: int) -> int:
    """Bytes to whole megabytes, truncating any remainder."""
    return memory_limit // MB


def environment(env: Mapping[str, str]) -> list[dict[str, str]]:
    """Flatten ``env`` into name/value pairs, sorted by name."""
    return [{"Name": k, "Value": env[k]} for k in sorted(env)]


def ulimits(nproc: int) -> list[dict[str, Any]]:
    if not nproc:
        return []
    return [{"Name": "nproc", "SoftLimit": nproc, "HardLimit": nproc}]


def container_definition(
    process: Process,
    *,
    log_configuration: Mapping[str, Any] | None = None,
    port_mappings: Sequence[Mapping[str, Any]] = (),
    extra_env: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Build the ECS container definition for ``process``.

    ``extra_env`` is layered over the process environment; the exposure
    strategy uses it to inject the container port.
    """
    env = {**process.env, **(extra_env or {})}
    cd: dict[str, Any] = {
        "Name": process.type,
        "Command": list(process.command),
        "Cpu": process.cpu_shares,
        "Image": process.image,
        "Essential": True,
        "Memory": memory_mb(process.memory_limit),
        "Environment": environment(env),
        "PortMappings": [dict(m) for m in port_mappings],
        "DockerLabels": dict(process.labels),
        "Ulimits": ulimits(process.nproc),
    }
    if log_configuration is not None:
        cd["LogConfiguration"] = copy.deepcopy(dict(log_configuration))
    return cd


def task_definition(container: Mapping[str, Any], *, owner: str | None = None) -> Resource:
    return Resource(
        type=TASK_DEFINITION,
        properties={
            "ContainerDefinitions": [dict(container)],
            "Volumes": [],
        },
        owner=owner,
    )
