# COMPONENT: REPORTING
# REQUIREMENTS SATISFIED: dashboard statistics, property options and CSV export
"""
coi_tracker/services/reporting.py

Read-only reports computed from a record collection.

Statistics are always computed from the full raw collection, never from
the filtered view. The CSV export takes whichever collection the caller
passes (raw or filtered) and writes a fixed column order: an unquoted
header row, then data rows with every cell quoted and dates in
"Mon DD, YYYY" form.
"""
import csv
import io
from datetime import date
from typing import Iterable, List, Optional

from ..schemas.coi import COI, COIStats
from ..utils.dates import days_until_expiry, format_date, format_timestamp

CSV_HEADERS = [
    "ID",
    "Property",
    "Tenant Name",
    "Unit",
    "COI Name",
    "Expiry Date",
    "Status",
    "Reminder Status",
    "Created At",
]


def get_total_stats(cois: Iterable[COI], today: Optional[date] = None) -> COIStats:
    cois = list(cois)
    today = today or date.today()

    accepted = sum(1 for c in cois if c.status == "Active")
    rejected = sum(1 for c in cois if c.status in ("Rejected", "Expired"))
    expiring = 0
    for c in cois:
        days = days_until_expiry(c.expiry_date, today)
        if 0 < days <= 30:
            expiring += 1

    return COIStats(
        total=len(cois),
        accepted=accepted,
        rejected=rejected,
        expiring_in_30_days=expiring,
    )


def get_unique_properties(cois: Iterable[COI]) -> List[str]:
    return sorted({c.property for c in cois})


def export_filename(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"COI_Export_{today.isoformat()}.csv"


def export_to_csv(cois: Iterable[COI]) -> str:
    buf = io.StringIO()
    buf.write(",".join(CSV_HEADERS) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for c in cois:
        writer.writerow([
            c.id,
            c.property,
            c.tenant_name,
            c.unit,
            c.coi_name,
            format_date(c.expiry_date),
            c.status,
            c.reminder_status,
            format_timestamp(c.created_at),
        ])
    return buf.getvalue()
