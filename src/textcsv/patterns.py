"""Metadata keys, media-type constants and markup element names.

Shared by the override resolver, the sniffer, the emitter and the metadata
annotator so that every stage agrees on the same literal strings.
"""

import re

# ─── Metadata Keys ────────────────────────────────────────────────────────────

CONTENT_TYPE = "Content-Type"

# Legacy field: the bare charset name, kept alongside the charset parameter
CONTENT_ENCODING = "Content-Encoding"

# Caller-forced classification, e.g. "text/csv; delimiter=pipe"
CONTENT_TYPE_OVERRIDE = "Content-Type-Override"

CSV_PREFIX = "csv"
DELIMITER_PROPERTY = f"{CSV_PREFIX}:delimiter"

# Number of cells in the first row (set once row 0 completes)
NUM_COLUMNS = f"{CSV_PREFIX}:num_columns"

# Number of rows read (set once the rows run out or the fallback kicks in)
NUM_ROWS = f"{CSV_PREFIX}:num_rows"


# ─── Media Types ──────────────────────────────────────────────────────────────

TEXT_PLAIN = "text/plain"
TEXT_CSV = "text/csv"
TEXT_TSV = "text/tsv"

SUPPORTED_TYPES = frozenset({TEXT_PLAIN, TEXT_CSV, TEXT_TSV})

CHARSET = "charset"
DELIMITER = "delimiter"

# RFC 2045 token: the characters allowed in a type, subtype or parameter name
TOKEN_RE = re.compile(r"^[A-Za-z0-9!#$&^_.+\-]+$")


# ─── Delimiters ───────────────────────────────────────────────────────────────

# Declaration order doubles as the sniffer's tie-break order
DEFAULT_DELIMITERS = {
    "comma": ",",
    "tab": "\t",
    "pipe": "|",
    "semicolon": ";",
}

QUOTE_CHAR = '"'

DEFAULT_MARK_LIMIT = 20000
DEFAULT_MIN_CONFIDENCE = 0.50


# ─── Markup ───────────────────────────────────────────────────────────────────

TABLE = "table"
TR = "tr"
TD = "td"
PARAGRAPH = "p"
FALLBACK_DIV = "div"
FALLBACK_NAME = "after exception"

READ_CHUNK = 4096
