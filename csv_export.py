import csv
import io
import json
import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence
from config import StoreConfig

logger = logging.getLogger(__name__)


def render_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(render_value(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def headers_for(records: Iterable[Mapping[str, Any]]) -> List[str]:
    keys = set()
    for record in records:
        keys.update(record.keys())
    return sorted(keys)


def project(records: Sequence[Mapping[str, Any]]) -> str:
    """Render all records as CSV text, every field quoted.

    The header row is the sorted union of keys; a record without a key gets
    an empty field in that column.
    """
    headers = headers_for(records)
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for record in records:
        writer.writerow([render_value(record.get(h)) for h in headers])
    return buf.getvalue().rstrip("\n")


class CsvProjector:
    def __init__(self, config: StoreConfig) -> None:
        self.path: Path = config.csv_path

    def exists(self) -> bool:
        return self.path.exists()

    def write(self, records: Sequence[Mapping[str, Any]]) -> bool:
        if not records:
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(project(records), encoding="utf-8")
        logger.info("Wrote %d responses to %s", len(records), self.path)
        return True
