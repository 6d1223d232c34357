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

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized environment configuration for procform.

    Env var naming: PROCFORM_<FIELD_NAME>.
    A .env file in CWD or ~/.procform/.env is read automatically.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROCFORM_",
        env_file=(".env", "~/.procform/.env"),
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # --- General -------------------------------------------------------------
    log_level: str = "INFO"
    home: Path = Field(
        default=Path("~/.procform").expanduser(),
        description="Path to procform home directory",
    )
    config_file: Path | None = Field(
        default_factory=lambda data: data["home"] / "template.yaml",
        description="Template configuration used when --config is not given",
    )

    # --- AWS -----------------------------------------------------------------
    aws_region: str | None = Field(
        default=None,
        alias="AWS_REGION",
        description="Region used for the Route53 hosted zone lookup",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached accessor. Call this wherever you need settings.
    Tests can `cache_clear()` before reading to pick up monkeypatched env.
    """
    return Settings()


def reload_settings_cache() -> None:
    get_settings.cache_clear()  # type: ignore[attr-defined]
