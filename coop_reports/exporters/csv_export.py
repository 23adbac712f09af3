"""CSV serialization of report views."""

import csv
import io
import logging
import re
from collections.abc import Mapping
from operator import attrgetter
from typing import Any, Callable, Iterable, Union

from coop_reports.exporters.serialization import format_cell

logger = logging.getLogger(__name__)

BOM = "\ufeff"

Accessor = Union[str, Callable[[Any], Any]]
ColumnMapping = Mapping[str, Accessor]

# Column layouts used by the admin portal exports
LOAN_COLUMNS: dict[str, Accessor] = {
    "ID Préstamo": "loan_id",
    "Cliente": "customer_name",
    "Email Cliente": "customer_email",
    "Monto Prestado": "principal",
    "Fecha de Solicitud": "application_date",
    "Estado": "status",
}

INSTALLMENT_COLUMNS: dict[str, Accessor] = {
    "Numero de Cuota": "installment_number",
    "Monto": "amount",
    "Fecha de Vencimiento": "due_date",
}

INSTALLMENT_ROW_COLUMNS: dict[str, Accessor] = {
    "Cliente": "customer_name",
    "Email Cliente": "customer_email",
    "ID Préstamo": "loan_id",
    "Cuota #": "installment_number",
    "Monto": "amount",
    "Vencimiento": "due_date",
    "Estado": "status",
}


def _resolve(row: Any, accessor: Accessor) -> Any:
    if callable(accessor):
        return accessor(row)
    if isinstance(row, Mapping):
        return row.get(accessor)
    return attrgetter(accessor)(row)


def export_to_csv(
    rows: Iterable[Any],
    column_mapping: ColumnMapping,
    *,
    locale: str = "es_EC",
    decimal_places: int = 2,
    include_bom: bool = True,
) -> str:
    """Serialize records to CSV text.

    Parameters
    ----------
    rows : Iterable[Any]
        Records to export, in output order. Dataclasses, plain objects
        and mappings are all accepted.
    column_mapping : ColumnMapping
        Ordered ``label -> accessor`` mapping. An accessor is either an
        attribute name (dotted paths allowed; a key for mapping rows) or a
        callable taking the row.
    locale : str
        Locale used for long-form dates.
    decimal_places : int
        Decimals written for amounts.
    include_bom : bool
        Prefix the output with a UTF-8 byte-order mark so spreadsheet
        tools detect the encoding.

    Returns
    -------
    str
        CSV text with a header row and CRLF line endings.
    """
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\r\n")
    writer.writerow(list(column_mapping.keys()))

    count = 0
    for row in rows:
        writer.writerow(
            [
                format_cell(_resolve(row, accessor), locale=locale, decimal_places=decimal_places)
                for accessor in column_mapping.values()
            ]
        )
        count += 1

    logger.debug("Serialized %d rows to CSV (%d columns)", count, len(column_mapping))
    content = output.getvalue()
    return BOM + content if include_bom else content


def build_export_filename(subject: str, filter_label: str | None = None) -> str:
    """Build the download filename for an export.

    ``reporte_<subject>_<filter label with whitespace as underscores>.csv``;
    the label part is omitted when no filter is applied.
    """
    name = f"reporte_{subject}"
    if filter_label and filter_label.strip():
        name += "_" + re.sub(r"\s+", "_", filter_label.strip())
    return f"{name}.csv"
