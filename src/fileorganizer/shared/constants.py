"""Application-wide constants for fileorganizer.

Constants are grouped into small classes, one per concern, so call sites
read as ``CLIDefaults.EXIT_ERROR`` or ``WorkerConfig.DEFAULT``.
"""

from __future__ import annotations

from typing import ClassVar


class Application:
    """Application identity."""

    NAME = "fileorganizer"
    VERSION = "0.1.0"
    ENV_PREFIX = "FILEORGANIZER_"


class WorkerConfig:
    """Worker pool configuration constants."""

    DEFAULT = 4
    MIN = 1
    MAX = 64


class QueueConfig:
    """Work queue configuration constants."""

    # 0 means unbounded
    DEFAULT_SIZE = 0
    PUT_POLL_INTERVAL = 1.0
    GET_POLL_INTERVAL = 0.5


class Timeout:
    """Timeouts in seconds."""

    SCAN_DRAIN = 60.0


class OrganizeDefaults:
    """Defaults for the organize operation."""

    SOURCE_DIRECTORY = "Downloads"
    CONFIG_FILE = "config.json"
    DEFAULT_CATEGORY = "Others"
    CONFLICT_SEPARATOR = "_"
    CANCELLED_REASON = "cancelled"


class MappingFormat:
    """Tokens of the JSON-like category mapping file."""

    COMMENT_PREFIX = "//"
    STRUCTURAL_LINES: ClassVar[frozenset[str]] = frozenset({"{", "}"})
    KEY_VALUE_SEPARATOR = ":"
    STRIP_CHARACTERS = "\"',"


class DefaultCategories:
    """Built-in extension to category mappings.

    ``FILE_GROUPS`` is written to a fresh mapping file; ``FALLBACK`` is used
    when a mapping file yields no usable entries.
    """

    FILE_GROUPS: ClassVar[tuple[tuple[str, str, tuple[str, ...]], ...]] = (
        ("Document files", "Documents", ("pdf", "doc", "docx", "txt", "odt", "rtf")),
        ("Image files", "Images", ("jpg", "jpeg", "png", "gif", "bmp", "svg", "webp")),
        ("Video files", "Videos", ("mp4", "avi", "mkv", "mov", "wmv", "flv")),
        ("Audio files", "Audio", ("mp3", "wav", "flac", "aac", "ogg")),
        ("Archive files", "Archives", ("zip", "rar", "7z", "tar", "gz")),
        ("Code files", "Code", ("java", "py", "js", "html", "css", "cpp", "c")),
        ("Spreadsheet files", "Spreadsheets", ("xls", "xlsx", "csv")),
        ("Presentation files", "Presentations", ("ppt", "pptx")),
    )

    FALLBACK: ClassVar[dict[str, str]] = {
        "pdf": "Documents",
        "doc": "Documents",
        "docx": "Documents",
        "txt": "Documents",
        "jpg": "Images",
        "jpeg": "Images",
        "png": "Images",
        "mp4": "Videos",
        "mp3": "Audio",
        "zip": "Archives",
    }


class CLIDefaults:
    """CLI default values and exit codes."""

    VERSION = Application.VERSION

    EXIT_SUCCESS = 0
    EXIT_ERROR = 1
    EXIT_PARTIAL_FAILURE = 2
    EXIT_INTERRUPTED = 130


class CLIHelp:
    """CLI help strings."""

    APP_NAME = Application.NAME
    APP_DESCRIPTION = "Organize files in a directory into category folders by extension."
    APP_STYLE = "rich"
    VERSION_TEXT = "fileorganizer v{version}"

    SOURCE_HELP = "Directory whose files are organized"
    CONFIG_HELP = "Category mapping file (created with defaults when missing)"
    WORKERS_HELP = "Number of concurrent move workers"
    TIMEOUT_HELP = "Seconds to wait for outstanding moves after the scan"
    SETTINGS_HELP = "Optional TOML settings file"


class LogConfig:
    """Logging configuration constants."""

    DEFAULT_LEVEL = "INFO"
    ROOT_LOGGER = "fileorganizer"
    TIME_FORMAT = "[%H:%M:%S]"
