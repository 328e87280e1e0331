"""Variant options: the customisation dimensions of a purchasable variant.

An option is either a plain string (Size = "M") or a colour with a swatch
value (Color = "Sage", #9CAF88). The case is decided once, when option
metadata is ingested, and travels with an explicit ``type`` tag from then on.
"""

import json
from dataclasses import dataclass
from typing import ClassVar

from protean.exceptions import ValidationError

from catalogue.shared.slug import humanize_label


@dataclass(frozen=True)
class StringOption:
    key: str
    label: str
    value: str

    type: ClassVar[str] = "string"

    def to_dict(self) -> dict:
        return {"type": self.type, "key": self.key, "label": self.label, "value": self.value}


@dataclass(frozen=True)
class ColorOption:
    key: str
    label: str
    value: str
    color_value: str

    type: ClassVar[str] = "color"

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "key": self.key,
            "label": self.label,
            "value": self.value,
            "color_value": self.color_value,
        }


VariantOption = StringOption | ColorOption


def option_from_dict(data: dict) -> VariantOption:
    """Rebuild an option from its tagged form. The tag is trusted, never re-inferred."""
    option_type = data.get("type")
    if option_type == ColorOption.type:
        return ColorOption(
            key=data["key"],
            label=data["label"],
            value=data["value"],
            color_value=data.get("color_value") or data["value"],
        )
    if option_type == StringOption.type:
        return StringOption(key=data["key"], label=data["label"], value=data["value"])
    raise ValidationError({"options": [f"Unknown variant option type: {option_type!r}"]})


def parse_variant_options(metadata: dict | None) -> list[VariantOption]:
    """Ingest free-form provider metadata into typed options.

    Only keys starting with ``option`` with a non-empty value are options. A value
    starting with ``#`` is a colour swatch.
    """
    options = []
    for key, value in (metadata or {}).items():
        if not key.startswith("option") or not value:
            continue
        value = str(value)
        if value.startswith("#"):
            options.append(ColorOption(key=key, label=humanize_label(key), value=value, color_value=value))
        else:
            options.append(StringOption(key=key, label=humanize_label(key), value=value))
    return options


def dump_options(options) -> str:
    return json.dumps([option.to_dict() for option in options])


def load_options(raw: str | None) -> tuple[VariantOption, ...]:
    if not raw:
        return ()
    return tuple(option_from_dict(item) for item in json.loads(raw))
