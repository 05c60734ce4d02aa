"""Category resolution from file names."""

from __future__ import annotations

from typing import Protocol

from fileorganizer.shared.constants import OrganizeDefaults


class CategoryLookup(Protocol):
    """Read-only mapping source consumed by CategoryResolver."""

    default_category: str

    def lookup_category(self, extension: str) -> str | None: ...


def split_extension(file_name: str) -> tuple[str, str]:
    """Split ``file_name`` into stem and extension (without the dot).

    The extension is whatever follows the last ``.``, unless that dot is the
    first or the last character, in which case there is no extension::

        >>> split_extension("report.final.PDF")
        ('report.final', 'PDF')
        >>> split_extension(".bashrc")
        ('.bashrc', '')
        >>> split_extension("archive.")
        ('archive.', '')
    """
    last_dot = file_name.rfind(".")
    if 0 < last_dot < len(file_name) - 1:
        return file_name[:last_dot], file_name[last_dot + 1 :]
    return file_name, ""


def get_extension(file_name: str) -> str:
    """Return the extension of ``file_name`` without the dot, or ``""``."""
    return split_extension(file_name)[1]


class CategoryResolver:
    """Maps a file name to its target category.

    Pure and deterministic: the result depends only on the file name and the
    mapping the resolver was created with.
    """

    def __init__(self, mapping: CategoryLookup) -> None:
        self._mapping = mapping

    @property
    def default_category(self) -> str:
        return self._mapping.default_category or OrganizeDefaults.DEFAULT_CATEGORY

    def resolve(self, file_name: str) -> str:
        extension = get_extension(file_name).lower()
        if not extension:
            return self.default_category
        category = self._mapping.lookup_category(extension)
        return category if category else self.default_category
