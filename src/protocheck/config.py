from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import BaseModel, ConfigDict, Field

from protocheck import log
from protocheck.schema.naming import CaseFormat


class ValidationSettings(BaseModel):
    """Settings shared by the schema loader and the validation engine.

    Attributes:
        max_depth: Deepest nesting level validated through ``validate`` constraints
        strict: Reject schemas with malformed constraints at load time instead of
            ignoring those constraints during validation
        package: Package prefix for message type names loaded from GraphQL
        accessor_case: Case used to derive accessor names from wire field names
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    max_depth: int = Field(64, ge=1, alias="maxDepth")
    strict: bool = True
    package: str | None = None
    accessor_case: CaseFormat | None = Field(None, alias="accessorCase")


def load_validation_settings(config_path: Path | None) -> ValidationSettings:
    """
    Load and validate settings from a YAML file.

    Args:
        config_path: Path to the YAML configuration file, or None for defaults.

    Returns:
        The validated settings.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the YAML root is not a mapping.
        ValidationError: If validation against ValidationSettings fails.
    """
    if config_path is None:
        log.debug("No settings file provided, using defaults")
        return ValidationSettings()

    raw: Any
    with config_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    log.debug("Loaded settings from %s", config_path)

    # Treat empty file or explicit YAML null as "defaults"
    if raw is None or raw == {}:
        return ValidationSettings()

    if not isinstance(raw, dict):
        raise TypeError(f"Settings root must be a mapping (YAML object), got {type(raw).__name__}")

    return ValidationSettings.model_validate(cast(dict[str, Any], raw))
