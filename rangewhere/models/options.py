"""
Configuration for a single range query.
"""

from dataclasses import dataclass

from rangewhere.models.exceptions import OptionRangeError, OptionTypeError


@dataclass(frozen=True)
class QueryOptions:
    """
    Per-call query configuration.

    Attributes:
        wide_range_key_strings: Use the wide string successor (s + "\\x00")
            instead of the narrow one when building end bounds.
        versions: Ask the scan for version numbers and emit them.
        offset: Number of otherwise-matching records to skip.
        bump_index: Position whose successor forms the end bound.
            Defaults to the last literal position.
        limit: Maximum number of results; None means unbounded.
        silent: Suppress the advisory full-scan / missing-DONE warnings.
    """

    wide_range_key_strings: bool = False
    versions: bool = False
    offset: int = 0
    bump_index: int | None = None
    limit: int | None = None
    silent: bool = False

    def __post_init__(self) -> None:
        _check_count("offset", self.offset)
        if self.limit is not None:
            _check_count("limit", self.limit)
        if self.bump_index is not None and not _is_int(self.bump_index):
            raise OptionTypeError(
                f"bump_index must be an int, got {type(self.bump_index).__name__}"
            )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_count(name: str, value: object) -> None:
    if not _is_int(value):
        raise OptionTypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise OptionRangeError(f"{name} must be >= 0, got {value}")
