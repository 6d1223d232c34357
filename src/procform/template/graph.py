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

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from procform.exceptions import DanglingReferenceError, ResourceCollisionError
from procform.template.refs import Ref, Reference, iter_references, render

# Pseudo parameters the provisioning engine always declares.
PSEUDO_PARAMETERS = frozenset(
    {
        "AWS::AccountId",
        "AWS::NotificationARNs",
        "AWS::NoValue",
        "AWS::Partition",
        "AWS::Region",
        "AWS::StackId",
        "AWS::StackName",
        "AWS::URLSuffix",
    }
)

TASK_DEFINITION = "AWS::ECS::TaskDefinition"
SERVICE = "AWS::ECS::Service"
LOAD_BALANCER = "AWS::ElasticLoadBalancing::LoadBalancer"
RECORD_SET = "AWS::Route53::RecordSet"
INSTANCE_PORT = "Custom::InstancePort"


@dataclass(frozen=True)
class Resource:
    """One node of the graph.

    ``owner`` is the process type that contributed the resource. It is used
    for diagnostics only and never rendered.
    """

    type: str
    properties: dict[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] | None = None
    version: str | None = None
    owner: str | None = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"Type": self.type}
        if self.version is not None:
            out["Version"] = self.version
        if self.metadata is not None:
            out["Metadata"] = render(self.metadata)
        out["Properties"] = render(self.properties)
        return out


class ResourceGraph:
    """Parameters/Resources/Outputs document assembled by the compiler."""

    def __init__(self) -> None:
        self.parameters: dict[str, dict[str, Any]] = {}
        self.resources: dict[str, Resource] = {}
        self.outputs: dict[str, dict[str, Any]] = {}

    def add(self, logical_id: str, resource: Resource) -> None:
        existing = self.resources.get(logical_id)
        if existing is not None:
            raise ResourceCollisionError(logical_id, owner=resource.owner, other=existing.owner)
        self.resources[logical_id] = resource

    def merge(self, contribution: Mapping[str, Resource]) -> None:
        for logical_id, resource in contribution.items():
            self.add(logical_id, resource)

    def of_type(self, resource_type: str) -> dict[str, Resource]:
        return {k: r for k, r in self.resources.items() if r.type == resource_type}

    def owned_by(self, process_type: str) -> "ResourceGraph":
        """Sub-graph of the resources contributed by ``process_type``."""
        sub = ResourceGraph()
        sub.merge({k: r for k, r in self.resources.items() if r.owner == process_type})
        return sub

    def references(self) -> Iterator[tuple[str, Reference]]:
        """Yield ``(source, reference)`` for every reference in the graph."""
        for logical_id, resource in self.resources.items():
            for ref in iter_references(resource.properties):
                yield logical_id, ref
            for ref in iter_references(resource.metadata):
                yield logical_id, ref
        for name, output in self.outputs.items():
            for ref in iter_references(output):
                yield name, ref

    def validate(self) -> None:
        """Raise DanglingReferenceError for the first unresolved reference."""
        for source, ref in self.references():
            target = ref.logical_id
            if target in self.resources:
                continue
            if isinstance(ref, Ref) and (target in self.parameters or target in PSEUDO_PARAMETERS):
                continue
            raise DanglingReferenceError(source, target)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Parameters": render(self.parameters),
            "Resources": {k: r.to_dict() for k, r in self.resources.items()},
            "Outputs": render(self.outputs),
        }

    def __len__(self) -> int:
        return len(self.resources)

