"""Fixed-width declaration file sink."""

import logging
from pathlib import Path

from dimob_gen.exceptions import SinkError
from dimob_gen.models import DeclarationResult

logger = logging.getLogger(__name__)


class TextFileSink:
    """Write generated payloads to ``<output_dir>/<owner_id>/DECLARATION_<year>.txt``."""

    def __init__(self, output_dir: str | Path) -> None:
        """Initialize text file sink.

        Parameters
        ----------
        output_dir : str | Path
            Root directory; one subdirectory is created per owner.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._written: list[Path] = []

    def write(self, result: DeclarationResult) -> Path | None:
        """Write one result's payload.

        Returns
        -------
        Path | None
            Path written, or ``None`` when the result carries no payload.
        """
        if not result.success:
            logger.debug("Owner %s has no payload (%s)", result.owner_id, result.status.value)
            return None

        file_path = self.output_dir / result.owner_id / result.filename
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            # Bytes, so the CRLF terminators are written untranslated
            file_path.write_bytes(result.payload_bytes)
        except OSError as e:
            raise SinkError(f"Failed to write {file_path}: {e}") from e

        logger.info("Wrote %s (%d bytes)", file_path, len(result.payload_bytes))
        self._written.append(file_path)
        return file_path

    @property
    def written(self) -> list[Path]:
        return list(self._written)

    def close(self) -> None:
        """Print summary."""
        print(f"Declaration files written to: {self.output_dir}")
        for path in self._written:
            print(f"  {path.relative_to(self.output_dir)}")
