#!/usr/bin/env python3

"""Human authored patch descriptions

A description names a patch and lists the bytes it expects to find and
replace at each offset. Descriptions are stored as YAML documents:

    name: Skip intro
    description: Jump straight to the main menu
    items:
      - offset: 0012A4
        old: 7405
        new: EB05
"""

from dataclasses import dataclass, field

import yaml

from ztpatch.errors import ValidationError


def _hex_to_bytes(s: str) -> bytes:
    # Only complete byte pairs are used, a trailing odd nibble is ignored
    s = "".join(s.split())
    return bytes.fromhex(s[: len(s) - (len(s) % 2)])


@dataclass
class PatchItem:
    """Single offset with original and replacement bytes"""

    offset: int = 0
    old_values: bytes = b""
    new_values: bytes = b""

    @property
    def offset_string(self) -> str:
        return f"{self.offset:06X}"

    @offset_string.setter
    def offset_string(self, value: str):
        self.offset = int(value, 16)

    @property
    def old_values_string(self) -> str:
        return self.old_values.hex().upper()

    @old_values_string.setter
    def old_values_string(self, value: str):
        self.old_values = _hex_to_bytes(value)

    @property
    def new_values_string(self) -> str:
        return self.new_values.hex().upper()

    @new_values_string.setter
    def new_values_string(self, value: str):
        self.new_values = _hex_to_bytes(value)

    @classmethod
    def from_dict(cls, d: dict):
        if not isinstance(d, dict) or "offset" not in d:
            raise ValidationError(f"Patch item {d!r} has no offset")
        item = cls()
        try:
            item.offset_string = d["offset"]
            item.old_values_string = d.get("old", "")
            item.new_values_string = d.get("new", "")
        except ValueError as e:
            raise ValidationError(f"Patch item at {d['offset']} is not valid hex ({e})") from None
        return item

    def to_dict(self) -> dict:
        return {
            "offset": self.offset_string,
            "old": self.old_values_string,
            "new": self.new_values_string,
        }


@dataclass
class PatchDescription:
    """Named list of patch items"""

    name: str = ""
    description: str = ""
    items: list[PatchItem] = field(default_factory=list)

    @classmethod
    def from_yaml(cls, text: str):
        # Scalars are kept as strings so hex fields such as 0012 are not
        # interpreted as YAML integers
        try:
            doc = yaml.load(text, Loader=yaml.BaseLoader) or {}
        except yaml.YAMLError as e:
            raise ValidationError(f"Invalid patch description ({e})") from None
        if not isinstance(doc, dict):
            raise ValidationError("Patch description is not a mapping")
        return cls(
            name=doc.get("name") or "",
            description=doc.get("description") or "",
            items=[PatchItem.from_dict(d) for d in doc.get("items") or []],
        )

    def to_yaml(self) -> str:
        doc = {
            "name": self.name,
            "description": self.description,
            "items": [item.to_dict() for item in self.items],
        }
        return yaml.safe_dump(doc, sort_keys=False)

    def runs(self) -> list[tuple[int, bytes]]:
        """Replacement runs in the same form as ``diff_runs``"""
        return [(item.offset, item.new_values) for item in self.items if item.new_values]
