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

from enum import Enum
import json

import yaml

from procform.exceptions import TemplateSerializationError
from procform.template.graph import ResourceGraph


class OutputFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"


def render_json(graph: ResourceGraph, *, sort_keys: bool = False, indent: int = 2) -> str:
    try:
        return json.dumps(graph.to_dict(), indent=indent, sort_keys=sort_keys, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise TemplateSerializationError(f"Failed to encode template as JSON: {e}") from e


def render_yaml(graph: ResourceGraph, *, sort_keys: bool = False) -> str:
    try:
        return yaml.safe_dump(graph.to_dict(), sort_keys=sort_keys, default_flow_style=False)
    except yaml.YAMLError as e:
        raise TemplateSerializationError(f"Failed to encode template as YAML: {e}") from e


def render(
    graph: ResourceGraph,
    fmt: OutputFormat | str = OutputFormat.JSON,
    *,
    sort_keys: bool = False,
) -> str:
    match OutputFormat(fmt):
        case OutputFormat.JSON:
            return render_json(graph, sort_keys=sort_keys)
        case OutputFormat.YAML:
            return render_yaml(graph, sort_keys=sort_keys)
