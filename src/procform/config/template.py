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

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
import yaml

from procform.models.app import PRIMARY_PROCESS
from procform.platform.route53 import HostedZone


class TemplateConfig(BaseModel):
    """Cluster-wide inputs of the template compiler.

    Everything here is fixed for the lifetime of a ``TemplateBuilder``; the
    only per-build input is the application itself.
    """

    model_config = ConfigDict(frozen=True)

    # cluster -----------------------------------------------------------------
    cluster: str = Field(description="ECS cluster the services run in")
    service_role: str = Field(
        description="IAM role ECS uses to register services with load balancers"
    )
    log_configuration: dict[str, Any] | None = Field(
        default=None,
        description="Container LogConfiguration, passed through untouched",
    )

    # networking --------------------------------------------------------------
    internal_security_group_id: str = ""
    external_security_group_id: str = ""
    internal_subnet_ids: list[str] = Field(default_factory=list)
    external_subnet_ids: list[str] = Field(default_factory=list)
    custom_resources_topic: str = Field(
        description="SNS topic ARN that receives instance port allocation requests"
    )

    # dns ---------------------------------------------------------------------
    hosted_zone: HostedZone | None = None
    primary_process: str = PRIMARY_PROCESS

    # tunables ----------------------------------------------------------------
    container_port: int = Field(default=8080, ge=1, le=65535)
    load_balancer_port: int = Field(default=80, ge=1, le=65535)
    connection_draining_timeout: int = Field(default=30, ge=0)
    cname_ttl: int = Field(default=60, ge=0)

    @classmethod
    def read(cls, path: str | Path) -> "TemplateConfig":
        with Path(path).open() as f:
            return cls.model_validate(yaml.safe_load(f) or {})

    def persist(self, path: str | Path) -> None:
        with Path(path).open("w") as f:
            yaml.safe_dump(self.model_dump(mode="json", exclude_none=True), f)
