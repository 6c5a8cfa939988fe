"""JSON report sink."""

import json
import logging
from pathlib import Path

from dimob_gen.exceptions import SinkError
from dimob_gen.models import DeclarationResult
from dimob_gen.sinks.serialization import result_to_dict

logger = logging.getLogger(__name__)


class JsonReportSink:
    """Write the structured report of every run, successful or not."""

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Initialize JSON report sink.

        Parameters
        ----------
        output_dir : str | Path
            Root directory; reports go next to the declaration files.
        pretty : bool
            Pretty-print JSON output.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.pretty = pretty
        self._reports: list[dict] = []

    def write(self, result: DeclarationResult) -> Path:
        """Write ``<owner_id>/DECLARATION_<year>.report.json``."""
        data = result_to_dict(result)
        file_path = self.output_dir / result.owner_id / f"DECLARATION_{result.fiscal_year}.report.json"
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(data, f, indent=2, ensure_ascii=False, default=str)
                else:
                    json.dump(data, f, ensure_ascii=False, default=str)
        except OSError as e:
            raise SinkError(f"Failed to write {file_path}: {e}") from e

        self._reports.append(result.to_report())
        logger.debug("Wrote report %s", file_path)
        return file_path

    def close(self) -> Path | None:
        """Write ``summary.json`` covering every report written so far."""
        if not self._reports:
            return None
        file_path = self.output_dir / "summary.json"
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self._reports, f, indent=2 if self.pretty else None, ensure_ascii=False, default=str)
        print(f"JSON reports written to: {self.output_dir}")
        return file_path
