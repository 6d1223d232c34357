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
from typing import TextIO

from procform.config.template import TemplateConfig
from procform.helpers import keys
from procform.helpers.logger import setup_logger
from procform.models.app import Application, Process
from procform.template import container, serializer
from procform.template.exposure import ExposureStrategy
from procform.template.graph import Resource, ResourceGraph
from procform.template.serializer import OutputFormat
from procform.template.service import service

logger = setup_logger(__name__, level=logging.INFO)


class TemplateBuilder:
    """Compiles an Application into a CloudFormation-shaped resource graph.

    The builder only holds configuration. Each ``build`` starts from an
    empty graph, performs no I/O and either returns a complete, validated
    graph or raises a ``ProcformError``.

    >>> builder = TemplateBuilder(TemplateConfig.read("template.yaml"))
    >>> graph = builder.build(app)
    >>> builder.execute(app, sys.stdout)
    """

    def __init__(self, config: TemplateConfig):
        self.config = config
        self.exposure = ExposureStrategy(config)

    def build(self, app: Application) -> ResourceGraph:
        graph = ResourceGraph()
        for process in app.processes:
            graph.merge(self.process_resources(app, process))
        graph.validate()
        logger.info(
            f"Built template for [cyan]{app.name}[/cyan]: "
            f"{len(app.processes)} processes, {len(graph)} resources"
        )
        return graph

    def process_resources(self, app: Application, process: Process) -> dict[str, Resource]:
        """Everything a single process contributes, keyed by logical id."""
        key = process.key
        exposed = self.exposure.build(app.name, process)

        cd = container.container_definition(
            process,
            log_configuration=self.config.log_configuration,
            port_mappings=exposed.port_mappings,
            extra_env=exposed.environment,
        )
        task_id = keys.task_definition_id(key)

        contribution = ResourceGraph()
        contribution.merge(exposed.resources)
        contribution.add(task_id, container.task_definition(cd, owner=process.type))
        contribution.add(
            keys.service_id(key),
            service(
                process,
                cluster=self.config.cluster,
                task_definition=task_id,
                load_balancers=exposed.load_balancers,
                role=self.config.service_role,
            ),
        )
        logger.debug(f"Process {process.type!r} -> {sorted(contribution.resources)}")
        return contribution.resources

    def render(
        self,
        app: Application,
        fmt: OutputFormat | str = OutputFormat.JSON,
        *,
        sort_keys: bool = False,
    ) -> str:
        return serializer.render(self.build(app), fmt, sort_keys=sort_keys)

    def execute(
        self,
        app: Application,
        stream: TextIO,
        fmt: OutputFormat | str = OutputFormat.JSON,
        *,
        sort_keys: bool = False,
    ) -> None:
        """Build and write the document to ``stream``; nothing is written on failure."""
        raw = self.render(app, fmt, sort_keys=sort_keys)
        stream.write(raw)
        if not raw.endswith("\n"):
            stream.write("\n")
