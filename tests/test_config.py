"""Environment selection and pyproject overrides."""

from pathlib import Path

import pytest

from people_pipeline.config import ENV_VARIABLE, load_pipeline_config

PYPROJECT = """
[tool.people_pipeline]
currency_decimals = 0
comment_delimiter = "; "

[tool.people_pipeline.staging]
output_dir = "/tmp/people-staging"
output_format = "json"
"""


@pytest.fixture
def pyproject(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text(PYPROJECT)
    return path


def test_defaults_to_development(monkeypatch, tmp_path):
    monkeypatch.delenv(ENV_VARIABLE, raising=False)
    config = load_pipeline_config(pyproject=tmp_path / "missing.toml")
    assert config.env == "development"
    assert config.log_level == "DEBUG"
    assert config.output_format == "csv"


def test_env_variable_selects_environment(monkeypatch, tmp_path):
    monkeypatch.setenv(ENV_VARIABLE, "production")
    config = load_pipeline_config(pyproject=tmp_path / "missing.toml")
    assert config.env == "production"
    assert config.output_format == "parquet"
    assert config.log_level == "WARNING"


def test_unknown_environment_rejected():
    with pytest.raises(ValueError, match="Unknown environment"):
        load_pipeline_config("qa")


def test_top_level_overrides_apply_to_every_env(pyproject):
    for env in ("development", "production"):
        config = load_pipeline_config(env, pyproject)
        assert config.currency_decimals == 0
        assert config.comment_delimiter == "; "


def test_env_table_overrides_only_its_env(pyproject):
    staging = load_pipeline_config("staging", pyproject)
    assert staging.output_dir == Path("/tmp/people-staging")
    assert staging.output_format == "json"

    development = load_pipeline_config("development", pyproject)
    assert development.output_format == "csv"


def test_unknown_override_key_rejected(tmp_path):
    path = tmp_path / "pyproject.toml"
    path.write_text('[tool.people_pipeline]\nrounding = "bankers"\n')
    with pytest.raises(ValueError, match="rounding"):
        load_pipeline_config("development", path)
