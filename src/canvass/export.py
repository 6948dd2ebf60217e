"""
Survey export (canvass → delimited text → shared file).

CSV Format:
    Fecha, Dirección, SI, NO, CT, Interés, Información adicional

Notes:
    - One header line, then one row per record, in list order
    - Commas inside notes become a single space, as spreadsheet users
      of the exported file expect
    - Every field is then written with standard CSV quoting, so an
      address or note containing a line break or a quote still parses
      as one row
    - The file name is fixed and overwritten on every export
"""

import csv
import logging
from io import StringIO
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from canvass.errors import ExportError
from canvass.model import SurveyRecord
from canvass.serialization import records_to_yaml

logger = logging.getLogger(__name__)

CSV_HEADER: List[str] = [
    "Fecha",
    "Dirección",
    "SI",
    "NO",
    "CT",
    "Interés",
    "Información adicional",
]
DEFAULT_FILENAME = "encuestas.csv"
DELIMITER = ","


def _clean_notes(notes: str) -> str:
    return notes.replace(DELIMITER, " ")


def record_to_row(record: SurveyRecord) -> List[str]:
    return [
        record.recorded_at,
        record.address,
        str(record.si),
        str(record.no),
        str(record.ct),
        str(record.interest),
        _clean_notes(record.notes),
    ]


def render_csv(records: Sequence[SurveyRecord]) -> str:
    """
    Flatten the survey list into CSV text.

    Returns:
        The document, "\\n"-terminated lines. An empty list yields the
        header line alone.
    """
    buffer = StringIO()
    writer = csv.writer(buffer, delimiter=DELIMITER, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        writer.writerow(record_to_row(record))
    return buffer.getvalue()


def render_yaml(records: Sequence[SurveyRecord]) -> str:
    return records_to_yaml(records)


RENDERERS = {
    "csv": render_csv,
    "yaml": render_yaml,
}


class Exporter:
    """
    Writes the rendered document to a fixed path and hands it to `share`.

    `share` stands in for the platform share sheet. Its return value is
    ignored; a user cancelling the share is not an error.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        filename: str = DEFAULT_FILENAME,
        share: Optional[Callable[[Path], object]] = None,
        fmt: str = "csv",
    ):
        if fmt not in RENDERERS:
            raise ValueError(f"Unknown export format {fmt!r}; expected one of {', '.join(RENDERERS)}")
        self.directory = Path(directory)
        self.filename = filename
        self.share = share
        self.fmt = fmt

    @property
    def path(self) -> Path:
        return self.directory / self.filename

    def export(self, records: Sequence[SurveyRecord]) -> Path:
        """
        Render, write (UTF-8, overwriting) and share.

        Raises:
            ExportError: If the file cannot be written or sharing fails
        """
        content = RENDERERS[self.fmt](records)
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ExportError(f"Cannot write export file {path}: {e}") from e

        if self.share is not None:
            try:
                self.share(path)
            except Exception as e:
                raise ExportError(f"Sharing {path} failed: {e}") from e

        logger.info("Exported %d surveys to %s", len(records), path)
        return path
