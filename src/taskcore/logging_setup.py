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

from __future__ import annotations
import io
import json
import os
import logging
from logging.config import dictConfig
from typing import Any, Dict, Optional

import yaml  # pyright: ignore[reportMissingModuleSource]

DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def stdout_config(level: str = DEFAULT_LEVEL) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "std": {"format": DEFAULT_FORMAT}
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stdout",
                "formatter": "std",
                "level": level,
            }
        },
        "root": {"level": level, "handlers": ["stdout"]},
        "loggers": {
            # uvicorn installs its own handlers; route everything through root instead
            "uvicorn": {"level": level, "handlers": [], "propagate": True},
            "uvicorn.access": {"level": level, "handlers": [], "propagate": True},
            "uvicorn.error": {"level": level, "handlers": [], "propagate": True},
        },
    }


def _load_config_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        text = fh.read()
    try:
        # Try JSON first
        return json.loads(text)
    except json.JSONDecodeError:
        # Fall back to YAML
        return yaml.safe_load(io.StringIO(text))


def _drop_file_handlers() -> None:
    root = logging.getLogger()
    for h in list(root.handlers):
        if hasattr(h, "baseFilename"):
            root.removeHandler(h)
            h.close()


def setup_logging(level: Optional[str] = None, config_path_env: str = "TASKCORE_LOGCFG") -> None:
    """
    Call this as the FIRST thing in your entrypoint.
    - If TASKCORE_LOGCFG points to a YAML/JSON dictConfig file, we load it.
    - Otherwise we force a stdout-only config and remove any pre-attached FileHandlers.
    """
    cfg_path = os.getenv(config_path_env, "").strip()
    if cfg_path and os.path.exists(cfg_path):
        dictConfig(_load_config_file(cfg_path))
        return

    # No external config → enforce stdout-only
    _drop_file_handlers()
    dictConfig(stdout_config((level or DEFAULT_LEVEL).upper()))
