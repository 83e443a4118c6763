# COMPONENT: SAMPLE DATASET
# REQUIREMENTS SATISFIED: first-run records when no snapshot exists
"""
coi_tracker/services/seed.py

Built-in sample records loaded when the snapshot slot is empty or damaged.
"""
from typing import List

from ..schemas.coi import COI

_SEED_ROWS = [
    (1, "Maplewood Apartments", "Sarah Johnson", "sarah.johnson@example.com", "101",
     "General Liability 2025", "2026-03-15", "Active", "Not Sent"),
    (2, "Maplewood Apartments", "David Chen", "david.chen@example.com", "204",
     "Renters Insurance", "2025-01-10", "Expired", "Sent (30d)"),
    (3, "Oak Ridge Plaza", "Emily Rodriguez", "emily.r@example.com", "12B",
     "Commercial Property Policy", "2025-11-30", "Expiring Soon", "Sent (60d)"),
    (4, "Oak Ridge Plaza", "Michael Brown", "m.brown@example.com", "3A",
     "Umbrella Policy", "2026-08-01", "Active", "N/A"),
    (5, "Riverside Commons", "Jessica Williams", "jwilliams@example.com", "7",
     "Tenant Liability Certificate", "2025-09-20", "Rejected", "Not Sent"),
    (6, "Riverside Commons", "Robert Johnson", "rjohnson@example.com", "15",
     "Workers Compensation", "2026-01-05", "Not Processed", "Not Sent"),
    (7, "Sunset Towers", "Amanda Lee", "amanda.lee@example.com", "1102",
     "General Liability 2026", "2026-12-31", "Active", "Not Sent"),
    (8, "Sunset Towers", "Kevin Patel", "kpatel@example.com", "905",
     "Auto Liability", "2024-12-01", "Expired", "Sent (30d)"),
    (9, "Harbor View Lofts", "Laura Martinez", "laura.m@example.com", "L4",
     "Property Damage Coverage", "2026-05-18", "Active", "Not Sent"),
    (10, "Harbor View Lofts", "Daniel Kim", "dkim@example.com", "L9",
     "Business Owners Policy", "2025-07-04", "Rejected", "Sent (60d)"),
]


def seed_cois() -> List[COI]:
    """Return a fresh copy of the sample dataset."""
    return [
        COI(
            id=row[0],
            property=row[1],
            tenant_name=row[2],
            tenant_email=row[3],
            unit=row[4],
            coi_name=row[5],
            expiry_date=row[6],
            status=row[7],
            reminder_status=row[8],
            created_at="2024-11-01T09:00:00.000Z",
        )
        for row in _SEED_ROWS
    ]
