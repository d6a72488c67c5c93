"""
End-to-end statement processing: rendered page images (or already recognized
text) -> validated transactions, year/month grouping and warning summary.

PDF rendering is the caller's job; this package only accepts raster page
images in page order.
"""

from .artifacts import serialize_statement_result, write_statement_json_artifact
from .contracts import StatementResult
from .module import process_statement_pages, process_statement_text

__all__ = [
    "StatementResult",
    "process_statement_pages",
    "process_statement_text",
    "serialize_statement_result",
    "write_statement_json_artifact",
]
