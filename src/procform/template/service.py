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
from typing import Any

from procform.models.app import Process
from procform.template.graph import SERVICE, Resource
from procform.template.refs import Ref


def service(
    process: Process,
    *,
    cluster: str,
    task_definition: str,
    load_balancers: Sequence[Mapping[str, Any]] = (),
    role: str | None = None,
) -> Resource:
    """Build the ECS service that keeps ``process.instances`` tasks running.

    ``role`` is only attached when the service registers with a load
    balancer. The metadata keeps the unnormalized process type, since the
    logical id is the normalized one.
    """
    properties: dict[str, Any] = {
        "Cluster": cluster,
        "DesiredCount": process.instances,
        "LoadBalancers": [dict(lb) for lb in load_balancers],
        "TaskDefinition": Ref(task_definition),
    }
    if load_balancers:
        properties["Role"] = role
    return Resource(
        type=SERVICE,
        properties=properties,
        metadata={"Name": process.type},
        owner=process.type,
    )
