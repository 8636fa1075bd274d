import csv
import io

from itemlister.export.schema import ExportSchema


def render_csv(schema: ExportSchema, rows: list[list[str]]) -> str:
    """Header line plus one line per row."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(schema.headers)
    writer.writerows(rows)
    return buffer.getvalue()
