"""
Configuration and logging setup for the registrar.

Configuration is a flat JSON object whose keys override the defaults of
RegistrarConfig, e.g.::

    {"data_dir": "data", "log_level": "DEBUG", "seed_demo_data": true}
"""

import json
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from .core.exceptions import ConfigurationError


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class RegistrarConfig(BaseModel):
    """Runtime settings for the registrar and its outer surfaces."""

    model_config = ConfigDict(extra="forbid")

    data_dir: str = "."
    students_file: str = "students.csv"
    instructors_file: str = "instructors.csv"
    courses_file: str = "courses.csv"
    enrollments_file: str = "enrollments.csv"
    seed_demo_data: bool = True
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    rest_host: str = "127.0.0.1"
    rest_port: int = 8000


def load_config(path: Optional[str] = None, **overrides: Any) -> RegistrarConfig:
    """
    Load configuration from a JSON file.

    Keys missing from the file keep their defaults. Keyword overrides that are
    not None win over the file.
    """
    values: Dict[str, Any] = {}

    if path is not None:
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}")
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Config file {path} is not valid JSON: {e}")

        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        values.update(raw)

    values.update({k: v for k, v in overrides.items() if v is not None})

    known = set(RegistrarConfig.model_fields)
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys: {', '.join(unknown)}",
            details={'unknown_keys': unknown}
        )

    try:
        return RegistrarConfig(**values)
    except PydanticValidationError as e:
        invalid = sorted(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise ConfigurationError(
            f"Invalid configuration values: {', '.join(invalid)}",
            details={'invalid_keys': invalid}
        )


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Attach handlers to the package logger. Safe to call more than once."""
    logger = logging.getLogger("registrar")
    log_level = getattr(logging, str(level).upper(), None)
    if not isinstance(log_level, int):
        raise ConfigurationError(f"Unknown log level: {level}")
    logger.setLevel(log_level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
