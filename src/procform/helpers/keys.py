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

import re

# Only alphanumeric logical ids are accepted by the provisioning engine.
_DISALLOWED = re.compile(r"[^a-zA-Z0-9]")


def normalize_key(process_type: str) -> str:
    """Strip every character outside ``[A-Za-z0-9]`` from ``process_type``.

    Distinct process types may normalize to the same key (``web-1`` and
    ``web1``); the graph assembler rejects the resulting collision.
    """
    return _DISALLOWED.sub("", process_type)


def task_definition_id(key: str) -> str:
    return f"{key}TaskDefinition"


def load_balancer_id(key: str) -> str:
    return f"{key}LoadBalancer"


def instance_port_id(key: str, container_port: int) -> str:
    return f"{key}{container_port}InstancePort"


def service_id(key: str) -> str:
    return key
