"""
Search configuration primitives for the proof-search driver.

These bounds cap the breadth-first search so every run terminates: a node
whose line count exceeds ``max_line_length`` is never expanded, and the
driver gives up after ``iterations`` expansions.  Nested sub-searches run by
disjunction elimination and conditional proof use their own, smaller budget.

Settings resolve in layers: dataclass defaults, then an optional YAML file,
then ``PROVER_*`` environment variables, then explicit overrides from callers
such as the CLI.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

DEFAULT_SETTINGS_PATH = "config/prover.yaml"

_ENV_FIELDS = {
    "PROVER_MAX_LINE_LENGTH": "max_line_length",
    "PROVER_ITERATIONS": "iterations",
    "PROVER_SUB_MAX_LINE_LENGTH": "sub_max_line_length",
    "PROVER_SUB_ITERATIONS": "sub_iterations",
    "PROVER_DEDUPE_STATES": "deduplicate_states",
}

_TRUTHY = ("1", "true", "yes", "on")


class SettingsError(ValueError):
    """Raised when a search configuration is malformed."""


@dataclass(frozen=True, slots=True)
class SearchSettings:
    """
    Limits for a single proof search.

    Attributes:
        max_line_length: Nodes with more lines than this are discarded unexpanded.
        iterations: Maximum number of node expansions before giving up.
        sub_max_line_length: Line bound for nested vE/CP sub-searches.
        sub_iterations: Expansion budget for each nested sub-search.
        deduplicate_states: Skip nodes whose multiset of line formulas was
            already enqueued.  Changes how the iteration budget is consumed.
    """

    max_line_length: int = 15
    iterations: int = 50_000
    sub_max_line_length: int = 15
    sub_iterations: int = 500
    deduplicate_states: bool = False

    def __post_init__(self) -> None:
        for name in ("max_line_length", "iterations", "sub_max_line_length", "sub_iterations"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise SettingsError(f"{name} must be a positive integer, got {value!r}")

    def sub_search(self) -> "SearchSettings":
        """
        Settings handed to nested sub-searches.

        A sub-proof is spliced into the outer proof, so its line bound never
        exceeds the outer one.
        """
        max_line_length = min(self.sub_max_line_length, self.max_line_length)
        return SearchSettings(
            max_line_length=max_line_length,
            iterations=self.sub_iterations,
            sub_max_line_length=max_line_length,
            sub_iterations=self.sub_iterations,
            deduplicate_states=self.deduplicate_states,
        )

    def replace(self, **overrides: Any) -> "SearchSettings":
        """Return a copy with the non-None ``overrides`` applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], base: Optional["SearchSettings"] = None) -> "SearchSettings":
        base = base or cls()
        search = data.get("search", {}) or {}
        sub = data.get("sub_search", {}) or {}
        if not isinstance(search, Mapping) or not isinstance(sub, Mapping):
            raise SettingsError("'search' and 'sub_search' sections must be mappings")
        try:
            return base.replace(
                max_line_length=_as_int(search.get("max_line_length")),
                iterations=_as_int(search.get("iterations")),
                deduplicate_states=_as_bool(search.get("deduplicate_states")),
                sub_max_line_length=_as_int(sub.get("max_line_length")),
                sub_iterations=_as_int(sub.get("iterations")),
            )
        except SettingsError:
            raise
        except (TypeError, ValueError) as exc:
            raise SettingsError(str(exc)) from exc

    @classmethod
    def from_file(cls, path: Path | str, base: Optional["SearchSettings"] = None) -> "SearchSettings":
        path = Path(path)
        if not path.exists():
            raise SettingsError(f"Settings file not found at: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"Error parsing YAML file: {path}") from exc
        if not isinstance(data, Mapping):
            raise SettingsError(f"Malformed settings file: expected a mapping in {path}")
        return cls.from_mapping(data, base)

    @classmethod
    def from_env(
        cls,
        base: Optional["SearchSettings"] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "SearchSettings":
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            raw = environ.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                if field_name == "deduplicate_states":
                    overrides[field_name] = raw.strip().lower() in _TRUTHY
                else:
                    overrides[field_name] = int(raw)
            except ValueError as exc:
                raise SettingsError(f"{env_name} must be an integer, got {raw!r}") from exc
        return (base or cls()).replace(**overrides)


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise SettingsError(f"expected an integer, got {value!r}")
    return value


def _as_bool(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def load_settings(
    path: Path | str | None = None,
    environ: Optional[Mapping[str, str]] = None,
    base: Optional[SearchSettings] = None,
) -> SearchSettings:
    """
    Resolve settings from the YAML file (when present) and the environment.

    ``path`` defaults to ``$PROVER_SETTINGS`` or ``config/prover.yaml``; a
    missing default file is not an error, a missing explicit file is.
    Layers apply on top of ``base`` (dataclass defaults when omitted).
    """
    environ = os.environ if environ is None else environ
    settings = base or SearchSettings()
    if path is not None:
        settings = SearchSettings.from_file(path, settings)
    else:
        candidate = Path(environ.get("PROVER_SETTINGS") or DEFAULT_SETTINGS_PATH)
        if candidate.exists():
            settings = SearchSettings.from_file(candidate, settings)
    return SearchSettings.from_env(settings, environ)


__all__ = ["DEFAULT_SETTINGS_PATH", "SearchSettings", "SettingsError", "load_settings"]
