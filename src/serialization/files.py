"""Export filenames, async file reading and the import pipeline.

Imports run decode, then the integrity check, then full validation, then a
recompute of every derived field. Each stage fails the whole import.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path

from src.errors.boundary import OperationResult, with_error_handling, with_error_handling_async
from src.tracker.exceptions import DataCorruptionError, ValidationFailedError
from src.tracker.lifecycle import recalculate_sprints
from src.tracker.models import AppConfig, AppData, ValidationResult, default_config
from src.validation.entities import validate_sprint
from src.validation.integrity import is_data_corrupted, validate_data_integrity

from .csv_codec import parse_csv
from .json_codec import parse_json_payload

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json")


def generate_filename(prefix: str, extension: str, now: datetime | None = None) -> str:
    """Build ``{prefix}_{timestamp}.{extension}`` from the current UTC time.

    The timestamp is ISO-8601 to the second with colons replaced by dashes,
    e.g. ``sprints_2024-03-01T09-30-00.csv``.
    """
    now = now or datetime.now(timezone.utc)
    return f"{prefix}_{now.strftime('%Y-%m-%dT%H-%M-%S')}.{extension}"


async def read_file_content(path: str | Path) -> str:
    """Read a whole text file without blocking the event loop."""
    return await asyncio.to_thread(Path(path).read_text, encoding="utf-8")


def _unsupported(fmt: str) -> ValidationFailedError:
    message = f"Unsupported import format: {fmt or '(none)'} (expected csv or json)"
    return ValidationFailedError("import", ValidationResult.from_errors([message], {"format": message}))


def _import_csv(text: str, defaults: AppConfig) -> AppData:
    sprints = parse_csv(text)
    errors: list[str] = []
    for index, sprint in enumerate(sprints):
        result = validate_sprint(sprint)
        errors.extend(f"Sprint {index + 1}: {e}" for e in result.errors)
    if errors:
        logger.warning(f"CSV import rejected: {len(errors)} validation error(s)")
        raise ValidationFailedError("import_csv", ValidationResult.from_errors(errors))
    return AppData(sprints=recalculate_sprints(sprints, defaults), config=defaults)


def _import_json(text: str) -> AppData:
    payload = parse_json_payload(text)
    if is_data_corrupted(payload):
        logger.warning("JSON import failed the integrity check")
        raise DataCorruptionError(
            "Imported data failed the integrity check", {"sprints": len(payload["sprints"])}
        )

    validation = validate_data_integrity(payload)
    if not validation.is_valid:
        logger.warning(f"JSON import rejected: {len(validation.errors)} validation error(s)")
        raise ValidationFailedError("import_json", validation)

    data = AppData.from_dict(payload)
    return AppData(sprints=recalculate_sprints(data.sprints, data.config), config=data.config)


def _import(text: str, fmt: str, defaults: AppConfig | None) -> AppData:
    fmt = fmt.lower().lstrip(".")
    if fmt == "csv":
        data = _import_csv(text, defaults or default_config())
    elif fmt == "json":
        data = _import_json(text)
    else:
        raise _unsupported(fmt)
    logger.info(f"Imported {len(data.sprints)} sprint(s) from {fmt.upper()}")
    return data


def import_text(
    text: str, fmt: str, defaults: AppConfig | None = None
) -> OperationResult[AppData]:
    """Import a dataset from CSV or JSON text.

    CSV carries sprints only, so the result uses ``defaults`` (or the
    built-in defaults) as its config.
    """
    return with_error_handling(lambda: _import(text, fmt, defaults), "import_text")


async def import_file(
    path: str | Path, defaults: AppConfig | None = None
) -> OperationResult[AppData]:
    """Read ``path`` and import it, choosing the format from its extension."""
    path = Path(path)

    async def run() -> AppData:
        fmt = path.suffix.lower().lstrip(".")
        if fmt not in SUPPORTED_FORMATS:
            raise _unsupported(fmt)
        text = await read_file_content(path)
        return _import(text, fmt, defaults)

    return await with_error_handling_async(run, "import_file")
