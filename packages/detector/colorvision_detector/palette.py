"""Named reference colors and the bundled palette resource."""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from .errors import InvalidInput
from .models import RGBColor

PALETTE_RESOURCE = "palette.json"


@dataclass(frozen=True)
class PaletteEntry:
    name: str
    rgb: RGBColor


class Palette:
    """Ordered, read-only collection of palette entries."""

    def __init__(self, entries: Iterable[PaletteEntry]) -> None:
        self._entries: tuple[PaletteEntry, ...] = tuple(entries)
        if not self._entries:
            raise InvalidInput("Palette must contain at least one color")
        for entry in self._entries:
            if not entry.name or not entry.name.strip():
                raise InvalidInput("Palette color names must not be blank")

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PaletteEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> PaletteEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"Palette({len(self._entries)} colors)"

    @property
    def entries(self) -> tuple[PaletteEntry, ...]:
        return self._entries

    def names(self) -> list[str]:
        return [e.name for e in self._entries]

    def find(self, name: str) -> PaletteEntry | None:
        wanted = name.strip().casefold()
        for entry in self._entries:
            if entry.name.casefold() == wanted:
                return entry
        return None

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> Palette:
        return cls(_entry_from_record(r) for r in records)


def _entry_from_record(record: Mapping[str, Any]) -> PaletteEntry:
    if not isinstance(record, Mapping):
        raise InvalidInput(f"Palette record must be an object, got {type(record).__name__}")
    name = str(record.get("name", "")).strip()
    if "hex" in record:
        color = RGBColor.from_hex(str(record["hex"]))
    elif all(k in record for k in ("r", "g", "b")):
        channels = [record["r"], record["g"], record["b"]]
        if any(not isinstance(c, int) or not 0 <= c <= 255 for c in channels):
            raise InvalidInput(f"Palette color {name!r} has channels outside 0-255")
        color = RGBColor.rgb(*channels)
    else:
        raise InvalidInput(f"Palette color {name!r} needs 'hex' or 'r'/'g'/'b'")
    return PaletteEntry(name=name, rgb=color.with_name(name))


def load_palette(path: Path | None = None) -> Palette:
    """Load a palette from a JSON list of records, or the bundled one."""
    if path is None:
        text = resources.files(__package__).joinpath("data").joinpath(PALETTE_RESOURCE).read_text(encoding="utf-8")
    else:
        text = Path(path).read_text(encoding="utf-8")

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidInput(f"Palette is not valid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise InvalidInput("Palette JSON must be a list of colors")
    return Palette.from_records(raw)
