"""Centralized project configuration and path resolution."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
import tomllib
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


DEFAULT_INPUT_FILE = "data/activity.json"
DEFAULT_OUTPUT_DIR = "outputs"
DEFAULT_CONFIG_FILE = "config/activity_pruner.yaml"

DEFAULT_SIGNIFICANT_DESCENT_M = 50.0
DEFAULT_PAUSE_GAP_MS = 1000.0
DEFAULT_NORMALIZED_POWER_MIN_SAMPLES = 30
DEFAULT_JOULES_TO_KCAL_FACTOR = 0.239


class PathSettings(BaseModel):
    """File and directory locations for this project."""

    input_file: str = DEFAULT_INPUT_FILE
    output_dir: str = DEFAULT_OUTPUT_DIR

    @field_validator("input_file", "output_dir")
    @classmethod
    def _non_empty_path(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("path values must not be empty")
        return cleaned


class PruningSettings(BaseModel):
    """Thresholds used by lap statistics and event synthesis."""

    model_config = ConfigDict(frozen=True)

    significant_descent_threshold_m: float = DEFAULT_SIGNIFICANT_DESCENT_M
    pause_gap_threshold_ms: float = DEFAULT_PAUSE_GAP_MS
    normalized_power_min_samples: int = DEFAULT_NORMALIZED_POWER_MIN_SAMPLES
    joules_to_kcal_factor: float = DEFAULT_JOULES_TO_KCAL_FACTOR

    @field_validator(
        "significant_descent_threshold_m",
        "pause_gap_threshold_ms",
        "normalized_power_min_samples",
        "joules_to_kcal_factor",
    )
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("pruning thresholds must be >= 0")
        return value


class RuntimeSettings(BaseModel):
    """Runtime behavior controls for the CLI."""

    create_output_dirs: bool = False


class ActivityPrunerConfig(BaseModel):
    """Typed configuration model for project behavior."""

    model_config = ConfigDict(extra="ignore")
    paths: PathSettings = Field(default_factory=PathSettings)
    pruning: PruningSettings = Field(default_factory=PruningSettings)
    runtime: RuntimeSettings = Field(default_factory=RuntimeSettings)


def find_project_root(start: Path | None = None) -> Path:
    """Find the project root by locating `pyproject.toml`."""
    env_root = os.getenv("ACTIVITY_PRUNER_PROJECT_ROOT")
    if env_root:
        return _resolve_path(Path(env_root), Path.cwd())

    cursor = (start or Path.cwd()).resolve()
    for candidate in (cursor, *cursor.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate

    # Installed without a checkout nearby: settle on the working directory.
    return Path.cwd().resolve()


@lru_cache(maxsize=1)
def default_project_config() -> ActivityPrunerConfig:
    """Load config with OmegaConf merge + Pydantic validation."""
    project_root = find_project_root()
    merged = _load_merged_config(project_root)
    try:
        return ActivityPrunerConfig.model_validate(merged)
    except ValidationError as exc:
        raise ValueError(f"Invalid activity_pruner config: {exc}") from exc


def resolve_input_file(input_path: str | Path | None = None) -> Path:
    """Resolve an explicit or default activity input path."""
    project_root = find_project_root()
    if input_path is None:
        input_path = default_project_config().paths.input_file
    return _resolve_path(Path(input_path), project_root)


def resolve_output_dir(output_dir: str | Path | None = None) -> Path:
    """Resolve an explicit or default output directory path."""
    project_root = find_project_root()
    config = default_project_config()
    if output_dir is None:
        output_dir = config.paths.output_dir
    resolved = _resolve_path(Path(output_dir), project_root)
    if config.runtime.create_output_dirs:
        resolved.mkdir(parents=True, exist_ok=True)
    return resolved


def clear_config_cache() -> None:
    """Clear cached config; useful for tests or env-var changes."""
    default_project_config.cache_clear()


def _load_merged_config(project_root: Path) -> dict[str, Any]:
    base_cfg = {
        "paths": {
            "input_file": DEFAULT_INPUT_FILE,
            "output_dir": DEFAULT_OUTPUT_DIR,
        },
        "pruning": {
            "significant_descent_threshold_m": DEFAULT_SIGNIFICANT_DESCENT_M,
            "pause_gap_threshold_ms": DEFAULT_PAUSE_GAP_MS,
            "normalized_power_min_samples": DEFAULT_NORMALIZED_POWER_MIN_SAMPLES,
            "joules_to_kcal_factor": DEFAULT_JOULES_TO_KCAL_FACTOR,
        },
        "runtime": {
            "create_output_dirs": False,
        },
    }

    merged = OmegaConf.merge(
        base_cfg,
        _load_pyproject_config(project_root),
        _load_file_config(project_root),
        _load_env_overrides(),
    )
    raw = OmegaConf.to_container(merged, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_file_config(project_root: Path) -> dict[str, Any]:
    env_path = os.getenv("ACTIVITY_PRUNER_CONFIG_FILE")
    if env_path:
        cfg_path = _resolve_path(Path(env_path), project_root)
        if not cfg_path.exists():
            raise FileNotFoundError(
                f"ACTIVITY_PRUNER_CONFIG_FILE points to missing file: {cfg_path}"
            )
    else:
        cfg_path = project_root / DEFAULT_CONFIG_FILE
        if not cfg_path.exists():
            return {}

    loaded = OmegaConf.load(cfg_path)
    raw = OmegaConf.to_container(loaded, resolve=True)
    return raw if isinstance(raw, dict) else {}


def _load_env_overrides() -> dict[str, Any]:
    paths: dict[str, Any] = {}
    if env_input := os.getenv("ACTIVITY_PRUNER_INPUT_FILE"):
        paths["input_file"] = env_input
    if env_output := os.getenv("ACTIVITY_PRUNER_OUTPUT_DIR"):
        paths["output_dir"] = env_output

    pruning: dict[str, Any] = {}
    if env_descent := os.getenv("ACTIVITY_PRUNER_SIGNIFICANT_DESCENT_M"):
        pruning["significant_descent_threshold_m"] = float(env_descent)
    if env_gap := os.getenv("ACTIVITY_PRUNER_PAUSE_GAP_MS"):
        pruning["pause_gap_threshold_ms"] = float(env_gap)

    runtime: dict[str, Any] = {}
    if env_create_output := os.getenv("ACTIVITY_PRUNER_CREATE_OUTPUT_DIRS"):
        runtime["create_output_dirs"] = _parse_env_bool(env_create_output)

    overrides: dict[str, Any] = {}
    if paths:
        overrides["paths"] = paths
    if pruning:
        overrides["pruning"] = pruning
    if runtime:
        overrides["runtime"] = runtime
    return overrides


def _resolve_path(path: Path, project_root: Path) -> Path:
    if path.is_absolute():
        return path.expanduser().resolve()
    return (project_root / path).resolve()


def _parse_env_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "on"}:
        return True
    if lowered in {"0", "false", "no", "off"}:
        return False
    raise ValueError(
        "ACTIVITY_PRUNER_CREATE_OUTPUT_DIRS must be one of: "
        "1,true,yes,on,0,false,no,off"
    )


def _load_pyproject_config(project_root: Path) -> dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as handle:
        pyproject = tomllib.load(handle)

    tool_cfg = pyproject.get("tool", {})
    pruner_cfg = tool_cfg.get("activity_pruner", {})
    return pruner_cfg if isinstance(pruner_cfg, dict) else {}
