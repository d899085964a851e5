from .csv_codec import CSV_HEADERS, EMPTY_EXPORT, decode_csv, encode_csv, parse_csv
from .files import generate_filename, import_file, import_text, read_file_content
from .json_codec import decode_json, encode_json, parse_json, parse_json_payload

__all__ = [
    "CSV_HEADERS",
    "EMPTY_EXPORT",
    "encode_csv",
    "parse_csv",
    "decode_csv",
    "encode_json",
    "parse_json_payload",
    "parse_json",
    "decode_json",
    "generate_filename",
    "read_file_content",
    "import_text",
    "import_file",
]
