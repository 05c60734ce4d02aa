"""Extension to category mapping.

The mapping file is a forgiving JSON-like text format, one pair per line::

    {
      // Document files
      "pdf": "Documents",
      "txt": "Documents"
    }

Comment lines, blank lines and braces are ignored, quotes and commas are
stripped, and extensions are stored lower-cased. A missing file is created
with the built-in groups so users have something to edit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from fileorganizer.shared.constants import DefaultCategories, MappingFormat, OrganizeDefaults
from fileorganizer.shared.errors import ErrorCode, create_config_error

logger = logging.getLogger(__name__)


def is_plain_category_name(name: str) -> bool:
    """Whether ``name`` is a single path component inside the source directory."""
    stripped = name.strip()
    if not stripped or stripped in (".", ".."):
        return False
    return "/" not in stripped and "\\" not in stripped


@dataclass(frozen=True)
class CategoryMapping:
    """Immutable extension to category lookup shared read-only by workers.

    Attributes:
        entries: Lower-cased extension (without dot) to category name
        default_category: Category for unmapped extensions
        source_path: File the mapping was loaded from, if any
        created_default_file: Whether the file was written with defaults
        used_fallback: Whether the built-in fallback mappings were used
    """

    entries: Mapping[str, str]
    default_category: str = OrganizeDefaults.DEFAULT_CATEGORY
    source_path: Path | None = None
    created_default_file: bool = False
    used_fallback: bool = False

    def __post_init__(self) -> None:
        for category in (*self.entries.values(), self.default_category):
            if not is_plain_category_name(category):
                msg = f"Category must be a plain directory name, got {category!r}"
                raise ValueError(msg)
        normalized = {ext.lower(): category for ext, category in self.entries.items()}
        object.__setattr__(self, "entries", MappingProxyType(normalized))

    @classmethod
    def from_pairs(
        cls,
        pairs: Iterable[tuple[str, str]] | Mapping[str, str],
        default_category: str = OrganizeDefaults.DEFAULT_CATEGORY,
    ) -> CategoryMapping:
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        return cls(entries=dict(items), default_category=default_category)

    def lookup_category(self, extension: str) -> str | None:
        """Return the category mapped to ``extension``, or None."""
        return self.entries.get(extension.lower())

    @property
    def count(self) -> int:
        """Number of configured extension mappings."""
        return len(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


def parse_mapping_lines(lines: Iterable[str]) -> dict[str, str]:
    """Parse mapping file lines into an extension to category dict.

    Later duplicates win. Malformed lines, and lines whose category is not
    a plain directory name, are skipped.
    """
    entries: dict[str, str] = {}
    for raw_line in lines:
        line = raw_line.strip()
        if (
            not line
            or line.startswith(MappingFormat.COMMENT_PREFIX)
            or line in MappingFormat.STRUCTURAL_LINES
        ):
            continue

        if MappingFormat.KEY_VALUE_SEPARATOR not in line:
            continue

        parts = line.split(MappingFormat.KEY_VALUE_SEPARATOR)
        if len(parts) != 2:
            logger.debug("Ignoring malformed mapping line: %s", line)
            continue

        extension = _strip_tokens(parts[0])
        category = _strip_tokens(parts[1])
        if not extension or not category:
            continue
        if not is_plain_category_name(category):
            logger.debug("Ignoring mapping line with unsafe category: %s", line)
            continue
        entries[extension.lower()] = category

    return entries


def _strip_tokens(value: str) -> str:
    return "".join(ch for ch in value.strip() if ch not in MappingFormat.STRIP_CHARACTERS).strip()


def render_default_mapping() -> list[str]:
    """Lines of the mapping file written when none exists."""
    lines = ["{"]
    groups = DefaultCategories.FILE_GROUPS
    for group_index, (title, category, extensions) in enumerate(groups):
        lines.append(f"  {MappingFormat.COMMENT_PREFIX} {title}")
        for ext_index, ext in enumerate(extensions):
            is_last = group_index == len(groups) - 1 and ext_index == len(extensions) - 1
            lines.append(f'  "{ext}": "{category}"' + ("" if is_last else ","))
        if group_index < len(groups) - 1:
            lines.append("")
    lines.append("}")
    return lines


def load_category_mapping(
    config_path: str | Path,
    default_category: str = OrganizeDefaults.DEFAULT_CATEGORY,
) -> CategoryMapping:
    """Load the category mapping, creating a default file when missing.

    Args:
        config_path: Path of the mapping file
        default_category: Category returned for unmapped extensions

    Returns:
        The loaded CategoryMapping

    Raises:
        ConfigLoadError: If the file cannot be read, or the default file
            cannot be written
    """
    path = Path(config_path)
    created = False

    if not path.exists():
        logger.info("Config file not found. Creating default configuration at %s", path)
        try:
            path.write_text("\n".join(render_default_mapping()) + "\n", encoding="utf-8")
        except OSError as e:
            raise create_config_error(
                f"Failed to create default configuration {path}: {e}",
                path,
                "create_default_mapping",
                code=ErrorCode.CONFIG_WRITE_FAILED,
                original_error=e,
            ) from e
        created = True

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise create_config_error(
            f"Failed to read configuration {path}: {e}",
            path,
            "load_category_mapping",
            original_error=e,
        ) from e

    entries = parse_mapping_lines(lines)
    used_fallback = False
    if not entries:
        logger.warning("No mappings found in %s, using built-in defaults", path)
        entries = dict(DefaultCategories.FALLBACK)
        used_fallback = True

    logger.debug("Loaded %d category mappings from %s", len(entries), path)
    return CategoryMapping(
        entries=entries,
        default_category=default_category,
        source_path=path,
        created_default_file=created,
        used_fallback=used_fallback,
    )
