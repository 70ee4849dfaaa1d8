"""Write pages as CSV in the same column layout the importer reads."""

import csv
import io

from site_architect.core.tree.nav import compute_nav_fields
from site_architect.models.page import Page

CSV_HEADERS = (
    "URL",
    "Meta Title",
    "Meta Description",
    "Target Keywords",
    "Page Type",
    "Icon",
    "Level",
    "Nav I",
    "Nav II",
    "Nav III",
    "Description",
    "Notes",
)


def pages_to_csv(pages: list[Page]) -> str:
    """Render pages as CSV, with nav columns derived from the hierarchy."""
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for row in compute_nav_fields(pages):
        p = row.page
        writer.writerow(
            [
                p.url, p.meta_title, p.meta_description, p.keyword, p.page_type, p.icon,
                p.level, row.nav_i, row.nav_ii, row.nav_iii, p.user_description, p.notes,
            ]
        )
    return out.getvalue()
