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

from procform.exceptions import HostedZoneRequiredError
from procform.models.app import (
    Exposure,
    HTTPExposure,
    HTTPSExposure,
    Process,
    TCPExposure,
    UnexposedExposure,
)
from procform.template.exposure import (
    CNAME_ID,
    PROCESS_TAG,
    SCHEME_EXTERNAL,
    SCHEME_INTERNAL,
    ExposureStrategy,
)
from procform.template.graph import INSTANCE_PORT, LOAD_BALANCER, RECORD_SET
from procform.template.refs import GetAtt, Ref


def _process(process_type="web", exposure=None):
    return Process(type=process_type, image="remind101/acme-inc:latest", exposure=exposure)


@pytest.mark.parametrize("exposure", [None, Exposure(type=UnexposedExposure())])
def test_unexposed_process_contributes_nothing(template_config, exposure):
    result = ExposureStrategy(template_config).build("acme-inc", _process(exposure=exposure))

    assert result.resources == {}
    assert result.load_balancers == []
    assert result.port_mappings == []
    assert result.environment == {}


def test_internal_http_exposure(template_config):
    result = ExposureStrategy(template_config).build(
        "acme-inc", _process("api", Exposure(external=False, type=HTTPExposure()))
    )

    assert set(result.resources) == {"api8080InstancePort", "apiLoadBalancer"}

    port = result.resources["api8080InstancePort"]
    assert port.type == INSTANCE_PORT
    assert port.version == "1.0"
    assert port.properties == {"ServiceToken": template_config.custom_resources_topic}

    lb = result.resources["apiLoadBalancer"]
    assert lb.type == LOAD_BALANCER
    assert lb.properties["Scheme"] == SCHEME_INTERNAL
    assert lb.properties["SecurityGroups"] == ["sg-internal"]
    assert lb.properties["Subnets"] == ["subnet-a", "subnet-b"]
    assert lb.properties["CrossZone"] is True
    assert lb.properties["Tags"] == [{"Key": PROCESS_TAG, "Value": "api"}]
    assert lb.properties["ConnectionDrainingPolicy"] == {"Enabled": True, "Timeout": 30}
    assert lb.properties["Listeners"] == [
        {
            "LoadBalancerPort": 80,
            "Protocol": "http",
            "InstancePort": GetAtt("api8080InstancePort", "InstancePort"),
            "InstanceProtocol": "http",
        }
    ]

    assert result.load_balancers == [
        {"ContainerName": "api", "ContainerPort": 8080, "LoadBalancerName": Ref("apiLoadBalancer")}
    ]
    assert result.port_mappings == [
        {"ContainerPort": 8080, "HostPort": GetAtt("api8080InstancePort", "InstancePort")}
    ]
    assert result.environment == {"PORT": "8080"}


def test_external_exposure_uses_public_network(template_config):
    result = ExposureStrategy(template_config).build(
        "acme-inc", _process("api", Exposure(external=True, type=TCPExposure()))
    )
    lb = result.resources["apiLoadBalancer"].properties

    assert lb["Scheme"] == SCHEME_EXTERNAL
    assert lb["SecurityGroups"] == ["sg-external"]
    assert lb["Subnets"] == ["subnet-c", "subnet-d"]
    assert len(lb["Listeners"]) == 1


def test_https_exposure_adds_certificate_listener(template_config):
    cert = "arn:aws:iam::123456789012:server-certificate/acme"
    result = ExposureStrategy(template_config).build(
        "acme-inc", _process("api", Exposure(type=HTTPSExposure(cert=cert)))
    )
    plain, secure = result.resources["apiLoadBalancer"].properties["Listeners"]

    assert plain["LoadBalancerPort"] == secure["LoadBalancerPort"] == 80
    assert plain["InstancePort"] == secure["InstancePort"]
    assert "SSLCertificateId" not in plain
    assert secure["SSLCertificateId"] == cert


def test_listeners_for_unexposed_type_are_empty(template_config):
    strategy = ExposureStrategy(template_config)
    assert strategy.listeners(UnexposedExposure(), GetAtt("x", "InstancePort")) == []


def test_primary_process_gets_cname(template_config):
    result = ExposureStrategy(template_config).build(
        "acme-inc", _process("web", Exposure(external=True))
    )
    record = result.resources[CNAME_ID]

    assert record.type == RECORD_SET
    assert record.properties == {
        "HostedZoneId": "/hostedzone/FAKEZONE",
        "Name": "acme-inc.empire.",
        "Type": "CNAME",
        "TTL": 60,
        "ResourceRecords": [Ref("webLoadBalancer")],
    }


def test_non_primary_process_gets_no_cname(template_config):
    result = ExposureStrategy(template_config).build(
        "acme-inc", _process("api", Exposure(external=True))
    )
    assert CNAME_ID not in result.resources


def test_missing_hosted_zone_is_reported(template_config):
    cfg = template_config.model_copy(update={"hosted_zone": None})
    with pytest.raises(HostedZoneRequiredError, match="'web'"):
        ExposureStrategy(cfg).build("acme-inc", _process("web", Exposure()))


def test_missing_hosted_zone_is_fine_without_primary(template_config):
    cfg = template_config.model_copy(update={"hosted_zone": None})
    result = ExposureStrategy(cfg).build("acme-inc", _process("api", Exposure()))
    assert CNAME_ID not in result.resources


def test_tunables_come_from_config(template_config):
    cfg = template_config.model_copy(
        update={
            "container_port": 9000,
            "load_balancer_port": 8000,
            "connection_draining_timeout": 5,
            "cname_ttl": 300,
            "primary_process": "api",
        }
    )
    result = ExposureStrategy(cfg).build("acme-inc", _process("api", Exposure()))

    assert "api9000InstancePort" in result.resources
    lb = result.resources["apiLoadBalancer"].properties
    assert lb["Listeners"][0]["LoadBalancerPort"] == 8000
    assert lb["ConnectionDrainingPolicy"]["Timeout"] == 5
    assert result.resources[CNAME_ID].properties["TTL"] == 300
    assert result.environment == {"PORT": "9000"}
    assert result.port_mappings[0]["ContainerPort"] == 9000
