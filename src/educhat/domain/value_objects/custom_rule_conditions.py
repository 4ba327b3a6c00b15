"""Conditions attached to a custom rule."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CustomRuleConditions:
    """Restrictions on a custom rule. Every present field must be satisfied."""

    channels: list[str] | None = None
    macrosetores: list[str] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "CustomRuleConditions | None":
        """Build from stored JSON; ``None`` or ``{}`` means unconditional."""
        if not data:
            return None
        channels = data.get("channels")
        macrosetores = data.get("macrosetores")
        return cls(
            channels=list(channels) if channels is not None else None,
            macrosetores=list(macrosetores) if macrosetores is not None else None,
        )

    def to_dict(self) -> dict[str, list[str]]:
        out: dict[str, list[str]] = {}
        if self.channels is not None:
            out["channels"] = list(self.channels)
        if self.macrosetores is not None:
            out["macrosetores"] = list(self.macrosetores)
        return out
