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

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict

from procform.exceptions import HostedZoneLookupError
from procform.helpers.logger import setup_logger

logger = setup_logger(__name__, level=logging.INFO)

HOSTED_ZONE_PREFIX = "/hostedzone/"


class HostedZone(BaseModel):
    """Identity of the Route53 zone that receives application CNAMEs.

    ``name`` is the fully-qualified zone name, trailing dot included
    (e.g. ``empire.``).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


def fix_hosted_zone_id_prefix(zone_id: str) -> str:
    """Accept both ``FAKEZONE`` and ``/hostedzone/FAKEZONE``."""
    if zone_id.startswith(HOSTED_ZONE_PREFIX):
        return zone_id
    return HOSTED_ZONE_PREFIX + zone_id


def make_route53_client(region: str | None = None) -> Any:
    import boto3

    return boto3.client("route53", region_name=region)


def lookup_hosted_zone(
    zone_id: str,
    client: Any | None = None,
    *,
    region: str | None = None,
) -> HostedZone:
    """Fetch the zone identity with Route53 ``GetHostedZone``.

    This is the only network call in the package and it happens before a
    build, never during one.
    """
    from botocore.exceptions import BotoCoreError, ClientError

    client = client or make_route53_client(region)
    zid = fix_hosted_zone_id_prefix(zone_id)
    try:
        out = client.get_hosted_zone(Id=zid)
    except (BotoCoreError, ClientError) as e:
        raise HostedZoneLookupError(f"Failed to look up hosted zone {zid}: {e}") from e

    zone = out.get("HostedZone") or {}
    if "Id" not in zone or "Name" not in zone:
        raise HostedZoneLookupError(f"Malformed GetHostedZone response for {zid}")

    logger.debug(f"Resolved hosted zone {zone['Id']} -> {zone['Name']}")
    return HostedZone(id=zone["Id"], name=zone["Name"])
