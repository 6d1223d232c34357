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

"""Network exposure of a process.

An exposed process gets a classic load balancer whose listeners forward to
a host port that is allocated while the stack is applied: a
``Custom::InstancePort`` resource publishes an allocation request to the
custom resources topic, and the handler answers with the ``InstancePort``
attribute. Every listener and port mapping reads that attribute through
``Fn::GetAtt``; no port number is ever known here.
"""

from dataclasses import dataclass, field
import logging
from typing import Any

from typing_extensions import assert_never

from procform.config.template import TemplateConfig
from procform.exceptions import HostedZoneRequiredError
from procform.helpers import keys
from procform.helpers.logger import setup_logger
from procform.models.app import (
    Exposure,
    ExposureType,
    HTTPExposure,
    HTTPSExposure,
    Process,
    TCPExposure,
    UnexposedExposure,
)
from procform.template.graph import INSTANCE_PORT, LOAD_BALANCER, RECORD_SET, Resource
from procform.template.refs import GetAtt, Ref

logger = setup_logger(__name__, level=logging.INFO)

SCHEME_INTERNAL = "internal"
SCHEME_EXTERNAL = "internet-facing"

CNAME_ID = "CNAME"
PROCESS_TAG = "procform.app.process"
INSTANCE_PORT_ATTRIBUTE = "InstancePort"


@dataclass(frozen=True)
class Visibility:
    scheme: str
    security_group: str
    subnets: list[str]


@dataclass(frozen=True)
class ExposureResult:
    """What an exposed process adds to the graph and to its own service."""

    resources: dict[str, Resource] = field(default_factory=dict)
    load_balancers: list[dict[str, Any]] = field(default_factory=list)
    port_mappings: list[dict[str, Any]] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)


class ExposureStrategy:
    def __init__(self, config: TemplateConfig):
        self.config = config

    def build(self, app_name: str, process: Process) -> ExposureResult:
        exposure = process.exposure
        if exposure is None or not exposure.exposed:
            return ExposureResult()

        cfg = self.config
        key = process.key
        port_id = keys.instance_port_id(key, cfg.container_port)
        lb_id = keys.load_balancer_id(key)
        instance_port = GetAtt(port_id, INSTANCE_PORT_ATTRIBUTE)

        resources: dict[str, Resource] = {
            port_id: self.instance_port(owner=process.type),
            lb_id: self.load_balancer(
                process,
                self.visibility(exposure),
                self.listeners(exposure.type, instance_port),
            ),
        }

        if process.type == cfg.primary_process:
            resources[CNAME_ID] = self.cname(app_name, process, lb_id)

        logger.debug(
            f"Exposing [cyan]{process.type}[/cyan] "
            f"({exposure.type.type}, external={exposure.external}) via {lb_id}"
        )

        return ExposureResult(
            resources=resources,
            load_balancers=[
                {
                    "ContainerName": process.type,
                    "ContainerPort": cfg.container_port,
                    "LoadBalancerName": Ref(lb_id),
                }
            ],
            port_mappings=[{"ContainerPort": cfg.container_port, "HostPort": instance_port}],
            environment={"PORT": str(cfg.container_port)},
        )

    def visibility(self, exposure: Exposure) -> Visibility:
        cfg = self.config
        if exposure.external:
            return Visibility(
                SCHEME_EXTERNAL, cfg.external_security_group_id, list(cfg.external_subnet_ids)
            )
        return Visibility(
            SCHEME_INTERNAL, cfg.internal_security_group_id, list(cfg.internal_subnet_ids)
        )

    def listeners(self, exposure_type: ExposureType, instance_port: GetAtt) -> list[dict[str, Any]]:
        """One plain listener, plus a TLS-terminating twin when a cert is set."""
        plain = {
            "LoadBalancerPort": self.config.load_balancer_port,
            "Protocol": "http",
            "InstancePort": instance_port,
            "InstanceProtocol": "http",
        }
        match exposure_type:
            case HTTPSExposure(cert=cert):
                return [plain, {**plain, "SSLCertificateId": cert}]
            case HTTPExposure() | TCPExposure():
                return [plain]
            case UnexposedExposure():
                return []
            case _:
                assert_never(exposure_type)

    def instance_port(self, *, owner: str | None = None) -> Resource:
        return Resource(
            type=INSTANCE_PORT,
            version="1.0",
            properties={"ServiceToken": self.config.custom_resources_topic},
            owner=owner,
        )

    def load_balancer(
        self,
        process: Process,
        visibility: Visibility,
        listeners: list[dict[str, Any]],
    ) -> Resource:
        return Resource(
            type=LOAD_BALANCER,
            properties={
                "Scheme": visibility.scheme,
                "SecurityGroups": [visibility.security_group],
                "Subnets": visibility.subnets,
                "Listeners": listeners,
                "CrossZone": True,
                "Tags": [{"Key": PROCESS_TAG, "Value": process.type}],
                "ConnectionDrainingPolicy": {
                    "Enabled": True,
                    "Timeout": self.config.connection_draining_timeout,
                },
            },
            owner=process.type,
        )

    def cname(self, app_name: str, process: Process, lb_id: str) -> Resource:
        zone = self.config.hosted_zone
        if zone is None:
            raise HostedZoneRequiredError(process.type)
        return Resource(
            type=RECORD_SET,
            properties={
                "HostedZoneId": zone.id,
                "Name": f"{app_name}.{zone.name}",
                "Type": "CNAME",
                "TTL": self.config.cname_ttl,
                "ResourceRecords": [Ref(lb_id)],
            },
            owner=process.type,
        )
