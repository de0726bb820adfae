"""
Result export for BOATMRP.

Writes report models (analyses, schedules, shortage reports) as JSON.
"""

from pathlib import Path

from pydantic import BaseModel

from boatmrp.errors import PlanningError


class ExportError(PlanningError):
    """Exception raised when writing a result fails."""

    pass


def save_result(result: BaseModel, path: str | Path) -> Path:
    """Write a report model to a JSON file.

    Args:
        result: Any report model
        path: Destination file

    Returns:
        Path written to

    Raises:
        ExportError: If writing fails
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write atomically by writing to temp file first
        temp_path = path.with_suffix(".tmp")
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(result.model_dump_json(indent=2))
        temp_path.replace(path)

        return path

    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
