"""Pipeline configuration and environment setup."""

import os
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

type ConfigDict = dict[str, str | int | bool | list[str]]

ENV_VARIABLE = "PEOPLE_PIPELINE_ENV"


@dataclass(frozen=True)
class PipelineConfig:
    env: str = "development"
    data_dir: Path = Path("data/raw/hr")
    output_dir: Path = Path("output/hr")
    output_format: str = "csv"
    currency_decimals: int = 2
    hierarchy_separator: str = " > "
    comment_delimiter: str = " | "
    log_level: str = "INFO"


DEFAULT_CONFIG = PipelineConfig()


def load_pipeline_config(
    env: str | None = None,
    pyproject: Path | None = None,
) -> PipelineConfig:
    """Build the config for an environment, layering pyproject overrides on top."""
    env = env or os.environ.get(ENV_VARIABLE, "development")

    match env:
        case "production":
            config = PipelineConfig(
                env=env,
                data_dir=Path("/srv/hris/exports"),
                output_dir=Path("/srv/people-analytics/output"),
                output_format="parquet",
                log_level="WARNING",
            )
        case "staging":
            config = PipelineConfig(
                env=env,
                data_dir=Path("/srv/hris/staging-exports"),
                output_dir=Path("/srv/people-analytics/staging-output"),
                output_format="parquet",
            )
        case "development":
            config = PipelineConfig(env=env, log_level="DEBUG")
        case other:
            raise ValueError(f"Unknown environment: {other}")

    # Top-level keys apply to every environment, [tool.people_pipeline.<env>] to one
    section = get_env_config(pyproject)
    overrides = {k: v for k, v in section.items() if not isinstance(v, dict)}
    overrides.update(section.get(env, {}))
    return _apply_overrides(config, overrides)


def get_env_config(pyproject: Path | None = None) -> ConfigDict:
    """Read pipeline config from pyproject.toml."""
    pyproject = pyproject or Path(__file__).parent.parent / "pyproject.toml"
    if not pyproject.exists():
        return {}
    with open(pyproject, "rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("people_pipeline", {})


def _apply_overrides(config: PipelineConfig, overrides: ConfigDict) -> PipelineConfig:
    known = {f.name for f in fields(PipelineConfig)}
    changes = {}
    for key, value in overrides.items():
        match key:
            case "env":
                continue
            case "data_dir" | "output_dir":
                changes[key] = Path(value)
            case k if k in known:
                changes[k] = value
            case unknown:
                raise ValueError(f"Unknown pipeline config key: {unknown}")
    return replace(config, **changes)
