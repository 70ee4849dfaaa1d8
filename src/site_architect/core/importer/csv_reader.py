"""Parse CSV page lists into import rows."""

import csv
import io

from loguru import logger

from site_architect.models.page import ImportRow

# Lower-cased header -> ImportRow field.
HEADER_MAP: dict[str, str] = {
    "url": "url",
    "path": "url",
    "slug": "url",
    "description": "user_description",
    "user description": "user_description",
    "page description": "user_description",
    "meta title": "meta_title",
    "metatitle": "meta_title",
    "title": "meta_title",
    "meta description": "meta_description",
    "metadescription": "meta_description",
    "keyword": "keyword",
    "keywords": "keyword",
    "target keyword": "keyword",
    "target keywords": "keyword",
    "page type": "page_type",
    "pagetype": "page_type",
    "type": "page_type",
    "icon": "icon",
    "level": "level",
    "lvl": "level",
    "nav i": "nav_i",
    "nav 1": "nav_i",
    "navi": "nav_i",
    "nav ii": "nav_ii",
    "nav 2": "nav_ii",
    "navii": "nav_ii",
    "nav iii": "nav_iii",
    "nav 3": "nav_iii",
    "naviii": "nav_iii",
    "notes": "notes",
    "note": "notes",
}


def detect_delimiter(text: str) -> str:
    """Pick tab, comma or semicolon from the header line."""
    first_line = text.split("\n", 1)[0]
    if "\t" in first_line:
        return "\t"
    if first_line.count(",") > first_line.count(";"):
        return ","
    return ";"


def map_header(header: str) -> str | None:
    return HEADER_MAP.get(header.strip().strip("\"'").lower())


def parse_csv(text: str) -> list[ImportRow]:
    """Parse CSV text with a header row into ImportRows.

    Unknown columns are ignored, rows without a URL are dropped, and a level
    that is not an integer is left unset.
    """
    text = text.strip()
    if not text:
        return []
    reader = csv.reader(io.StringIO(text), delimiter=detect_delimiter(text))
    rows = [r for r in reader if any(cell.strip() for cell in r)]
    if len(rows) < 2:
        return []

    fields = [map_header(h) for h in rows[0]]
    result: list[ImportRow] = []
    for line_no, values in enumerate(rows[1:], start=2):
        data: dict[str, str | int] = {}
        for field, raw in zip(fields, values, strict=False):
            value = raw.strip()
            if field is None or not value:
                continue
            if field == "level":
                try:
                    data[field] = int(value)
                except ValueError:
                    logger.debug("Line {}: ignoring non-numeric level {!r}", line_no, value)
                continue
            data[field] = value
        if "url" not in data:
            logger.debug("Line {}: skipping row without URL", line_no)
            continue
        result.append(ImportRow(**data))  # type: ignore[arg-type]
    return result
