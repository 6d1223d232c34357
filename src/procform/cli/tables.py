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

from collections.abc import Iterable

from rich.console import Console
from rich.table import Table

from procform.template.graph import ResourceGraph


def resource_table(graph: ResourceGraph, *, title: str | None = None) -> Table:
    """Table of logical id, resource type and owning process."""
    t = Table(
        title=title,
        show_header=True,
        header_style="bold",
        expand=True,
        pad_edge=False,
    )
    t.add_column("Logical ID", style="cyan", no_wrap=True)
    t.add_column("Type", no_wrap=True)
    t.add_column("Process", style="magenta")
    for logical_id in sorted(graph.resources):
        r = graph.resources[logical_id]
        t.add_row(logical_id, r.type, r.owner or "-")
    return t


def render_resources(graph: ResourceGraph, *, title: str | None = None, console: Console | None = None):
    console = console or Console()
    console.print(resource_table(graph, title=title))


def summary_rows(graph: ResourceGraph) -> Iterable[tuple[str, int]]:
    counts: dict[str, int] = {}
    for r in graph.resources.values():
        counts[r.type] = counts.get(r.type, 0) + 1
    return sorted(counts.items())
