import logging

from rich.logging import RichHandler

from protocheck.logger import ProtocheckLogger, get_logger

__version__ = "0.1.0"

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)],
)

log: ProtocheckLogger = get_logger("protocheck")

from protocheck.config import ValidationSettings, load_validation_settings  # noqa: E402
from protocheck.errors import (  # noqa: E402
    ProtocheckError,
    SchemaConfigurationError,
    UnsupportedConstraintError,
)
from protocheck.schema.descriptors import (  # noqa: E402
    FieldDescriptor,
    FieldKind,
    MessageSchema,
    ScalarType,
    SchemaPool,
)
from protocheck.schema.loader import build_schema_pool, load_schema  # noqa: E402
from protocheck.validation.engine import MessageValidator, validate  # noqa: E402
from protocheck.validation.violations import ConstraintViolation, format_violations, render  # noqa: E402

__all__ = [
    "ConstraintViolation",
    "FieldDescriptor",
    "FieldKind",
    "MessageSchema",
    "MessageValidator",
    "ProtocheckError",
    "ScalarType",
    "SchemaConfigurationError",
    "SchemaPool",
    "UnsupportedConstraintError",
    "ValidationSettings",
    "build_schema_pool",
    "format_violations",
    "load_schema",
    "load_validation_settings",
    "log",
    "render",
    "validate",
]
