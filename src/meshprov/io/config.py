"""
Configuration for the meshprov.io module.

Defines MeshSettings, a frozen dataclass carrying runtime configuration for network
admission and persistence. Values are resolved with precedence env > TOML > defaults.

Source of truth
- Range semantics and allocation policy live in meshprov.core; settings only choose
  how meshprov.io reacts to rejections and conflicts.

Import DAG discipline
- Depends only on stdlib.
- Does not import meshprov.core at module import time.

Notes
- conflict_policy decides what ProvisionerNetwork.add does when a candidate's ranges
  overlap an admitted Provisioner: "raise" (default), "warn" (log and admit) or
  "ignore" (admit silently).
- strict_allocation makes ProvisionerNetwork.allocate raise AllocationError instead
  of returning the rejection reason.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from .errors import MeshConfigError

ConflictPolicy = Literal["raise", "warn", "ignore"]

_CONFLICT_POLICIES: frozenset[str] = frozenset({"raise", "warn", "ignore"})


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
    return False


@dataclass(frozen=True)
class MeshSettings:
    """
    Runtime settings for the meshprov.io layer.

    Attributes:
        strict_allocation (bool): Raise on rejected allocations made through a network.
        conflict_policy (Literal["raise","warn","ignore"]): Reaction to overlapping
            ranges when admitting a Provisioner.
        indent (int): JSON indent used when saving a network (0 writes canonical
            compact JSON).

    Examples:
        >>> from meshprov.io.config import MeshSettings
        >>> MeshSettings(conflict_policy="warn")  # doctest: +ELLIPSIS
        MeshSettings(...)
    """

    strict_allocation: bool = False
    conflict_policy: ConflictPolicy = "raise"
    indent: int = 2

    @classmethod
    def _apply_mapping(cls, base: MeshSettings, cfg: dict[str, Any] | None) -> MeshSettings:
        """Apply a loose config mapping onto MeshSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        if "strict_allocation" in cfg:
            s = replace(s, strict_allocation=_bool(cfg["strict_allocation"]))

        if "conflict_policy" in cfg and isinstance(cfg["conflict_policy"], str):
            policy = cfg["conflict_policy"].strip().lower()
            if policy in _CONFLICT_POLICIES:
                s = replace(s, conflict_policy=policy)  # type: ignore[arg-type]

        if "indent" in cfg:
            try:
                indent = int(cfg["indent"])
            except (TypeError, ValueError):
                indent = s.indent
            if indent >= 0:
                s = replace(s, indent=indent)

        return s

    @classmethod
    def from_env(cls, base: MeshSettings | None = None, prefix: str = "MESHPROV_") -> MeshSettings:
        """
        Build MeshSettings from environment variables. Precedence is env > base > defaults.

        Recognized variables:
            - MESHPROV_STRICT_ALLOCATION (1/0/true/false/yes/no/on/off)
            - MESHPROV_CONFLICT_POLICY ("raise" | "warn" | "ignore")
            - MESHPROV_INDENT
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("strict_allocation", "conflict_policy", "indent"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> MeshSettings:
        """
        Build MeshSettings from a TOML file.

        Search order when `path` is None:
            1) ./meshprov.toml (with either a [network] table or top-level keys)
            2) ./pyproject.toml under [tool.meshprov]

        Returns defaults if no file is found.

        Raises:
            MeshConfigError: If an explicit `path` is missing or is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            explicit = Path(path)
            if not explicit.exists():
                raise MeshConfigError(f"config file not found: {explicit}")
            cand.append(explicit)
        else:
            cand.append(Path.cwd() / "meshprov.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as e:
                if path is not None:
                    raise MeshConfigError(f"invalid TOML in {p}: {e}") from e
                continue
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("meshprov", {}) if isinstance(tool, dict) else None
            elif isinstance(data.get("network"), dict):
                cfg = data["network"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> MeshSettings:
        """
        Load MeshSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults
                (meshprov.toml, pyproject.toml).

        Returns:
            MeshSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
