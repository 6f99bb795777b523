"""CLI helpers for KVBENCH.

URL sanitization for safe display, message emitters that write to stderr with
emoji→ASCII fallbacks, and the NAME=LEVEL logger option parser.
"""

from .db_url import sanitize_url
from .log_level_parser import parse_log_level
from .messages import error, success, warn

__all__ = ["sanitize_url", "parse_log_level", "warn", "success", "error"]
