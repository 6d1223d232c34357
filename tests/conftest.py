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

from procform.config.template import TemplateConfig
from procform.models.app import Application, Exposure, HTTPExposure, Process
from procform.platform.route53 import HostedZone

MB = 1024 * 1024


@pytest.fixture(autouse=True)
def clear_settings_cache_between_tests():
    from procform.config.settings import reload_settings_cache

    reload_settings_cache()
    yield
    reload_settings_cache()


@pytest.fixture
def hosted_zone():
    return HostedZone(id="/hostedzone/FAKEZONE", name="empire.")


@pytest.fixture
def template_config(hosted_zone):
    return TemplateConfig(
        cluster="cluster",
        service_role="ecsServiceRole",
        custom_resources_topic="arn:aws:sns:us-east-1:123456789012:custom-resources",
        internal_security_group_id="sg-internal",
        external_security_group_id="sg-external",
        internal_subnet_ids=["subnet-a", "subnet-b"],
        external_subnet_ids=["subnet-c", "subnet-d"],
        hosted_zone=hosted_zone,
        log_configuration={
            "LogDriver": "syslog",
            "Options": {"syslog-address": "udp://localhost:514"},
        },
    )


@pytest.fixture
def web_process():
    return Process(
        type="web",
        command=["./bin/web"],
        image="remind101/acme-inc:latest",
        cpu_shares=128,
        memory_limit=128 * MB,
        instances=2,
        env={"FOO": "bar"},
        labels={"empire.app.process": "web"},
        exposure=Exposure(external=True, type=HTTPExposure()),
    )


@pytest.fixture
def worker_process():
    return Process(
        type="worker",
        command=["./bin/worker"],
        image="remind101/acme-inc:latest",
        cpu_shares=256,
        memory_limit=256 * MB,
        instances=1,
        nproc=256,
    )


@pytest.fixture
def acme_app(web_process, worker_process):
    return Application(name="acme-inc", processes=[web_process, worker_process])
