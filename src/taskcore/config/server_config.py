# Copyright 2024 TaskCore Contributors
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

"""
Server configuration for the TaskCore API.

Everything is read from environment variables; ``create_app`` also accepts an
explicit ``ServerConfig`` so tests never depend on the process environment.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes")


def _env_flag(env: Mapping[str, str], name: str, default: str) -> bool:
    return env.get(name, default).strip().lower() in _TRUTHY


def _normalize_prefix(prefix: str) -> str:
    prefix = prefix.strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix


@dataclass(frozen=True)
class ServerConfig:
    """Runtime settings for the API process."""
    host: str = "0.0.0.0"
    port: int = 8002
    log_level: str = "INFO"
    api_prefix: str = ""
    cors_allow_origins: Tuple[str, ...] = field(default_factory=lambda: ("*",))
    enable_metrics_endpoint: bool = True

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build a config from environment variables.

        Args:
            env: Mapping to read from (defaults to ``os.environ``)

        Returns:
            ServerConfig with defaults for anything unset
        """
        env = os.environ if env is None else env

        port_raw = env.get("PORT", "8002")
        try:
            port = int(port_raw)
        except ValueError:
            logger.warning(f"⚠️ Invalid PORT={port_raw!r}, falling back to 8002")
            port = 8002

        origins = tuple(o.strip() for o in env.get("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip())

        return cls(
            host=env.get("HOST", "0.0.0.0"),
            port=port,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            api_prefix=_normalize_prefix(env.get("TASKCORE_API_PREFIX", "")),
            cors_allow_origins=origins or ("*",),
            enable_metrics_endpoint=_env_flag(env, "ENABLE_METRICS_ENDPOINT", "true"),
        )
