from .logging import get_logger
from .file_ops import load_json_file, write_json_file
from .helpers import generate_id, format_time_ago, truncate_text, format_duration
from .timestamps import now_ms, iso_now, to_iso

__all__ = [
    'get_logger',
    'load_json_file',
    'write_json_file',
    'generate_id',
    'format_time_ago',
    'truncate_text',
    'format_duration',
    'now_ms',
    'iso_now',
    'to_iso',
]
