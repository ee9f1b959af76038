from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from rec_browser.core.exceptions import ConfigError
from rec_browser.core.values import AttributeType


@dataclass(frozen=True)
class AttributeSpec:
    """
    One typed attribute to extract from every input record.
    """
    name: str
    attr_type: AttributeType

    @classmethod
    def from_raw(cls, raw: Any, index: int) -> AttributeSpec:
        if not isinstance(raw, dict):
            raise ConfigError(f"attrs[{index}] must be a mapping with 'name' and 'type'")
        if "name" not in raw:
            raise ConfigError(f"attrs[{index}] is missing 'name'")
        if "type" not in raw:
            raise ConfigError(f"attrs[{index}] ('{raw['name']}') is missing 'type'")
        try:
            attr_type = AttributeType.from_value(raw["type"])
        except ValueError as exc:
            raise ConfigError(f"attrs[{index}] ('{raw['name']}'): {exc}") from exc
        return cls(name=str(raw["name"]), attr_type=attr_type)


@dataclass
class InputSpec:
    """
    Parsed input spec.

    Fields:

    - attrs: attributes extracted from each record, in column order
    - group_by: attributes whose value tuple defines a group
    - show_in_grouped: extra attributes shown next to the key in grouped mode
    - timeline: optional DateTime attribute drawn as a per-group timeline
    """
    attrs: List[AttributeSpec]
    group_by: List[str] = field(default_factory=list)
    show_in_grouped: List[str] = field(default_factory=list)
    timeline: Optional[str] = None
    source_path: Optional[Path] = None

    @classmethod
    def from_raw(cls, raw: Any, source_path: Optional[Path] = None) -> InputSpec:
        if not isinstance(raw, dict):
            raise ConfigError("Input spec must be a mapping")

        attrs_raw = raw.get("attrs")
        if not attrs_raw or not isinstance(attrs_raw, list):
            raise ConfigError("Input spec requires a non-empty 'attrs' list")

        timeline = raw.get("timeline")
        spec = cls(
            attrs=[AttributeSpec.from_raw(a, i) for i, a in enumerate(attrs_raw)],
            group_by=[str(name) for name in raw.get("group_by") or []],
            show_in_grouped=[str(name) for name in raw.get("show_in_grouped") or []],
            timeline=str(timeline) if timeline is not None else None,
            source_path=source_path,
        )
        spec.validate()
        return spec

    def attribute_types(self) -> Dict[str, AttributeType]:
        return {a.name: a.attr_type for a in self.attrs}

    def validate(self) -> None:
        """
        Check the spec is self-consistent.

        Raises:
            ConfigError: on duplicate attributes, unknown group/extra/timeline
            attributes, or a timeline attribute that is not a DateTime
        """
        types = self.attribute_types()
        if len(types) != len(self.attrs):
            raise ConfigError("spec contains duplicates")

        for name in self.group_by:
            if name not in types:
                raise ConfigError(f"missing grouping attribute {name} in spec")
        for name in self.show_in_grouped:
            if name not in types:
                raise ConfigError(f"missing attribute {name} requested to show in grouped mode")

        if self.timeline is not None:
            if self.timeline not in types:
                raise ConfigError(f"missing timeline attribute {self.timeline} in spec")
            if types[self.timeline] is not AttributeType.DATETIME:
                raise ConfigError(
                    f"timeline attribute {self.timeline} must be of type DateTime, "
                    f"got {types[self.timeline].value}"
                )
