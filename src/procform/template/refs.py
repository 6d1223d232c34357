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

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Ref:
    """Direct reference to a resource or parameter by logical id."""

    logical_id: str

    def render(self) -> dict[str, str]:
        return {"Ref": self.logical_id}


@dataclass(frozen=True)
class GetAtt:
    """Attribute of a resource that is only known once the stack is applied."""

    logical_id: str
    attribute: str

    def render(self) -> dict[str, list[str]]:
        return {"Fn::GetAtt": [self.logical_id, self.attribute]}


Reference = Union[Ref, GetAtt]


def iter_references(value: Any) -> Iterator[Reference]:
    """Yield every reference embedded anywhere in ``value``."""
    if isinstance(value, (Ref, GetAtt)):
        yield value
    elif isinstance(value, Mapping):
        for v in value.values():
            yield from iter_references(v)
    elif isinstance(value, (list, tuple)):
        for v in value:
            yield from iter_references(v)


def render(value: Any) -> Any:
    """Return a copy of ``value`` made only of plain dicts, lists and scalars."""
    if isinstance(value, (Ref, GetAtt)):
        return value.render()
    if isinstance(value, Mapping):
        return {k: render(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [render(v) for v in value]
    return value
