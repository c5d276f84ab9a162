"""Output formats: the Formatter protocol and the format registry.

A format is registered once, by the module that implements it, with all
that callers need to know about it: how to build its formatter and which
options that formatter takes, the file suffix it owns, and for delimited
text formats the delimiter and field escaping used by ``serialize`` and
selection copy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlgrid.core.exceptions import InputError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator

    from sqlgrid.core.models import ResultSet


@runtime_checkable
class Formatter(Protocol):
    """Turns one ResultSet into output lines, yielded so callers can stream."""

    def format(self, result: ResultSet) -> Iterator[str]: ...


@dataclass(frozen=True)
class TextDialect:
    """Delimiter and field escaping of a delimited text format."""

    delimiter: str
    escape: Callable[[Any], str]

    def join(self, values: Iterable[Any]) -> str:
        return self.delimiter.join(self.escape(value) for value in values)


@dataclass(frozen=True)
class FormatInfo:
    name: str
    factory: Callable[..., Formatter]
    options: tuple[str, ...] = ()
    suffix: str | None = None
    dialect: TextDialect | None = None


class FormatterRegistry:
    def __init__(self) -> None:
        self._formats: dict[str, FormatInfo] = {}

    def register(
        self,
        name: str,
        factory: Callable[..., Formatter],
        *,
        options: tuple[str, ...] = (),
        suffix: str | None = None,
        dialect: TextDialect | None = None,
    ) -> FormatInfo:
        info = FormatInfo(name, factory, options, suffix, dialect)
        self._formats[name] = info
        return info

    def info(self, name: str) -> FormatInfo:
        """Raises KeyError naming the registered formats."""
        if name not in self._formats:
            msg = f"Unknown format {name!r}. Available: {', '.join(self.available)}"
            raise KeyError(msg)
        return self._formats[name]

    def get(self, name: str, **options: Any) -> Formatter:
        """Build the named formatter.

        Options the format did not declare are dropped, so callers can pass
        the full option set (config, no_header) to any format.
        """
        info = self.info(name)
        accepted = {key: value for key, value in options.items() if key in info.options}
        return info.factory(**accepted)

    def dialect(self, name: str) -> TextDialect:
        info = self._formats.get(name)
        if info is None or info.dialect is None:
            msg = f"Unsupported text format {name!r}. Available: {', '.join(self.text_formats)}"
            raise InputError(msg)
        return info.dialect

    def for_suffix(self, suffix: str) -> str | None:
        """Format owning a file suffix such as ``.tsv`` (case-insensitive)."""
        suffix = suffix.lower()
        for info in self._formats.values():
            if info.suffix is not None and info.suffix == suffix:
                return info.name
        return None

    @property
    def available(self) -> list[str]:
        return sorted(self._formats)

    @property
    def text_formats(self) -> list[str]:
        return sorted(name for name, info in self._formats.items() if info.dialect)


# Populated by the formatter modules on import.
registry = FormatterRegistry()
