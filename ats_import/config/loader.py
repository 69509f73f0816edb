from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.job import Job

"""Config loader.

Responsibilities:
- Load YAML config (config/import.yml by default)
- Validate against the bundled JSON schema (config_schema.json)
- Apply defaults for every missing key
- Load the job list used for job lookups at commit time
"""

SCHEMA_DIR = Path(__file__).parent
CONFIG_SCHEMA_PATH = SCHEMA_DIR / "config_schema.json"
JOBS_SCHEMA_PATH = SCHEMA_DIR / "jobs_schema.json"

DEFAULT_CONFIG_PATH = Path("config/import.yml")
DEFAULT_ASSIGNEE_ID = 1  # admin user, used when a job has no assignees
MAX_BATCH_SIZE = 100  # bulk-import endpoint limit per request


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ImportConfig:
    default_assignee_id: int = DEFAULT_ASSIGNEE_ID
    default_source: str = "Bulk Import"
    default_stage: str = "Applied"
    max_batch_size: int = MAX_BATCH_SIZE
    accepted_extensions: list[str] = field(default_factory=lambda: [".csv", ".xlsx", ".xls"])


def _validate(data: Any, schema_path: Path) -> None:
    """Validate data against a bundled JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            data fails schema validation (missing required keys, wrong types,
            unknown keys).
    """
    if not schema_path.exists():
        raise ConfigError(f"schema not found: {schema_path}")
    try:
        schema = json.loads(schema_path.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e


def load_config(path: Path | None = None) -> ImportConfig:
    """Load the import configuration.

    With ``path=None`` the default location is tried and built-in defaults
    are returned when it does not exist. An explicit path must exist.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return ImportConfig()
        path = DEFAULT_CONFIG_PATH
    data = _read_yaml(path) or {}
    _validate(data, CONFIG_SCHEMA_PATH)

    defaults = ImportConfig()
    return ImportConfig(
        default_assignee_id=data.get("default_assignee_id", defaults.default_assignee_id),
        default_source=data.get("default_source", defaults.default_source),
        default_stage=data.get("default_stage", defaults.default_stage),
        max_batch_size=data.get("max_batch_size", defaults.max_batch_size),
        accepted_extensions=list(data.get("accepted_extensions", defaults.accepted_extensions)),
    )


def load_jobs(path: Path) -> list[Job]:
    """Load a job list (YAML ``jobs:`` sequence, API field names)."""
    data = _read_yaml(path) or {}
    _validate(data, JOBS_SCHEMA_PATH)
    return [
        Job(
            id=raw["id"],
            title=raw["title"],
            assigned_to=list(raw.get("assignedTo", [])),
            department=raw.get("department", ""),
            status=raw.get("status", "Active"),
        )
        for raw in data["jobs"]
    ]
