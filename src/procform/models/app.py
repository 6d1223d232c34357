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

import json
from pathlib import Path
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import yaml

from procform.helpers.keys import normalize_key

# Conventional name of the process that receives the application CNAME.
PRIMARY_PROCESS = "web"


class UnexposedExposure(BaseModel):
    """Declared but not reachable; compiles exactly like no exposure."""

    model_config = ConfigDict(frozen=True)

    type: Literal["unexposed"] = "unexposed"


class HTTPExposure(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["http"] = "http"


class HTTPSExposure(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["https"] = "https"
    cert: str = Field(description="Certificate identifier used for TLS termination")


class TCPExposure(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["tcp"] = "tcp"


ExposureType = Annotated[
    Union[UnexposedExposure, HTTPExposure, HTTPSExposure, TCPExposure],
    Field(discriminator="type"),
]


class Exposure(BaseModel):
    model_config = ConfigDict(frozen=True)

    external: bool = False
    type: ExposureType = Field(default_factory=HTTPExposure)

    @property
    def exposed(self) -> bool:
        return not isinstance(self.type, UnexposedExposure)


class Process(BaseModel):
    """A single process of an application, with its command already resolved."""

    model_config = ConfigDict(frozen=True)

    type: str
    command: list[str] = Field(default_factory=list)
    image: str
    cpu_shares: int = Field(default=256, ge=0)
    memory_limit: int = Field(default=512 * 1024 * 1024, ge=0, description="Bytes")
    instances: int = Field(default=1, ge=0)
    env: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)
    nproc: int = Field(default=0, ge=0)
    exposure: Exposure | None = None

    @field_validator("type")
    @classmethod
    def _has_alphanumerics(cls, v: str) -> str:
        if not normalize_key(v):
            raise ValueError(f"process type {v!r} has no alphanumeric characters")
        return v

    @property
    def key(self) -> str:
        return normalize_key(self.type)

    @property
    def exposed(self) -> bool:
        return self.exposure is not None and self.exposure.exposed


class Application(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    processes: list[Process] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_process_types(self):
        seen: set[str] = set()
        for p in self.processes:
            if p.type in seen:
                raise ValueError(f"duplicate process type {p.type!r}")
            seen.add(p.type)
        return self

    def process(self, process_type: str) -> Process | None:
        return next((p for p in self.processes if p.type == process_type), None)


def load_application(path: str | Path) -> Application:
    """Load an application description from a YAML or JSON file."""
    path = Path(path)
    text = path.read_text()
    match path.suffix.lower():
        case ".json":
            data = json.loads(text)
        case ".yaml" | ".yml":
            data = yaml.safe_load(text)
        case _:
            raise ValueError(f"Unsupported application file format: {path.suffix.lower()}")
    return Application.model_validate(data or {})
