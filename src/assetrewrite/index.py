"""Match ordering and inverse lookup over an asset map."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .errors import AssetMapError


def validate_asset_map(asset_map: object) -> dict[str, str]:
    """Return a plain copy of ``asset_map`` or raise AssetMapError.

    Keys and values must be strings and keys must be non-empty.
    """
    if not isinstance(asset_map, Mapping):
        msg = f"Asset map must be a mapping, got {type(asset_map).__name__}"
        raise AssetMapError(msg)

    validated: dict[str, str] = {}
    for key, value in asset_map.items():
        if not isinstance(key, str):
            msg = f"Asset map key must be a string, got {key!r}"
            raise AssetMapError(msg)
        if not key:
            msg = "Asset map keys must not be empty"
            raise AssetMapError(msg)
        if not isinstance(value, str):
            msg = f"Asset map value for {key!r} must be a string, got {value!r}"
            raise AssetMapError(msg)
        validated[key] = value
    return validated


def keys_by_match_priority(asset_map: Mapping[str, str]) -> tuple[str, ...]:
    """Return the keys longest first.

    ``sorted`` is stable, so keys of equal length keep their map order.
    """
    return tuple(sorted(asset_map, key=len, reverse=True))


def inverse_of(asset_map: Mapping[str, str]) -> dict[str, str]:
    """Map each replacement back to its original path (last one wins)."""
    return {replacement: original for original, replacement in asset_map.items()}


@dataclass(frozen=True)
class AssetIndex:
    """Read-only view of an asset map built once per run."""

    assets: Mapping[str, str]
    keys_by_priority: tuple[str, ...]
    inverse: Mapping[str, str] = field(repr=False)

    @classmethod
    def build(cls, asset_map: object) -> AssetIndex:
        """Validate ``asset_map`` and derive the ordering and inverse map."""
        assets = validate_asset_map(asset_map)
        return cls(
            assets=MappingProxyType(assets),
            keys_by_priority=keys_by_match_priority(assets),
            inverse=MappingProxyType(inverse_of(assets)),
        )

    def __len__(self) -> int:
        return len(self.assets)

    def original_name(self, path: str) -> str | None:
        """Return the pre-fingerprint name for ``path``, if it is a replacement."""
        return self.inverse.get(path)
