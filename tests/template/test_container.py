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

import pytest

from procform.models.app import Process
from procform.template import container
from procform.template.graph import TASK_DEFINITION


def _process(**overrides):
    data = {
        "type": "worker",
        "command": ["./bin/worker", "--queue", "default"],
        "image": "remind101/acme-inc:latest",
        "cpu_shares": 512,
        "memory_limit": 104857600,
        "env": {"ZED": "1", "ALPHA": "2"},
        "labels": {"team": "platform"},
    }
    data.update(overrides)
    return Process.model_validate(data)


@pytest.mark.parametrize(
    "memory_limit, expected",
    [(104857600, 100), (104857601, 100), (104857599, 99), (0, 0)],
)
def test_memory_is_truncated_to_megabytes(memory_limit, expected):
    assert container.memory_mb(memory_limit) == expected


def test_ulimits():
    assert container.ulimits(0) == []
    assert container.ulimits(256) == [{"Name": "nproc", "SoftLimit": 256, "HardLimit": 256}]


def test_environment_is_sorted_by_name():
    assert container.environment({"b": "2", "a": "1"}) == [
        {"Name": "a", "Value": "1"},
        {"Name": "b", "Value": "2"},
    ]


def test_container_definition_translates_process():
    cd = container.container_definition(_process(nproc=1024))

    assert cd == {
        "Name": "worker",
        "Command": ["./bin/worker", "--queue", "default"],
        "Cpu": 512,
        "Image": "remind101/acme-inc:latest",
        "Essential": True,
        "Memory": 100,
        "Environment": [
            {"Name": "ALPHA", "Value": "2"},
            {"Name": "ZED", "Value": "1"},
        ],
        "PortMappings": [],
        "DockerLabels": {"team": "platform"},
        "Ulimits": [{"Name": "nproc", "SoftLimit": 1024, "HardLimit": 1024}],
    }


def test_container_definition_layers_extra_env_and_ports():
    cd = container.container_definition(
        _process(env={"PORT": "3000", "A": "x"}),
        port_mappings=[{"ContainerPort": 8080, "HostPort": 9000}],
        extra_env={"PORT": "8080"},
    )
    assert cd["Environment"] == [
        {"Name": "A", "Value": "x"},
        {"Name": "PORT", "Value": "8080"},
    ]
    assert cd["PortMappings"] == [{"ContainerPort": 8080, "HostPort": 9000}]


def test_log_configuration_is_optional():
    log = {"LogDriver": "syslog"}
    assert "LogConfiguration" not in container.container_definition(_process())
    cd = container.container_definition(_process(), log_configuration=log)
    assert cd["LogConfiguration"] == log


def test_task_definition_has_no_volumes():
    cd = container.container_definition(_process())
    td = container.task_definition(cd, owner="worker")

    assert td.type == TASK_DEFINITION
    assert td.owner == "worker"
    assert td.properties == {"ContainerDefinitions": [cd], "Volumes": []}
