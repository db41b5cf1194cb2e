"""Tests for configuration loading"""

import pytest

from azure_quick_review.core.errors import ConfigurationError
from azure_quick_review.utils.config import ConfigurationLoader

from .fakes import AZQR_VARIABLES


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in AZQR_VARIABLES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = ConfigurationLoader().load_configuration()

    assert config.services == []
    assert config.plugin_workers == 8
    assert config.parallel_workers >= 1
    assert config.output_format == "table"
    assert config.mask_subscriptions is True


def test_yaml_file_is_flattened(tmp_path):
    path = tmp_path / "azqr.yaml"
    path.write_text(
        "services: [kv, st]\n"
        "plugin_workers: 4\n"
        "output:\n"
        "  format: json\n"
        "  file: report.json\n"
    )

    config = ConfigurationLoader().load_configuration(str(path))

    assert config.services == ["kv", "st"]
    assert config.plugin_workers == 4
    assert config.output_format == "json"
    assert config.output_file == "report.json"


def test_environment_overrides_file_and_overrides_win(tmp_path, monkeypatch):
    path = tmp_path / "azqr.yml"
    path.write_text("parallel_workers: 2\nmask_subscriptions: true\n")
    monkeypatch.setenv("AZQR_PARALLEL_WORKERS", "6")
    monkeypatch.setenv("AZQR_SERVICES", "kv, aks ,")
    monkeypatch.setenv("AZQR_MASK_SUBSCRIPTIONS", "false")

    config = ConfigurationLoader().load_configuration(str(path), parallel_workers=3, services=None)

    assert config.parallel_workers == 3
    assert config.services == ["kv", "aks"]
    assert config.mask_subscriptions is False


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "azqr.yaml"
    path.write_text("services: [kv]\ncolour: blue\n")

    assert ConfigurationLoader().load_configuration(str(path)).services == ["kv"]


@pytest.mark.parametrize("overrides", [
    {"parallel_workers": 0},
    {"plugin_workers": 0},
    {"output_format": "html"},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ConfigurationError):
        ConfigurationLoader().load_configuration(**overrides)


def test_invalid_environment_integer(monkeypatch):
    monkeypatch.setenv("AZQR_PLUGIN_WORKERS", "many")
    with pytest.raises(ConfigurationError):
        ConfigurationLoader().load_configuration()


def test_missing_or_unsupported_file(tmp_path):
    with pytest.raises(ConfigurationError):
        ConfigurationLoader().load_configuration(str(tmp_path / "missing.yaml"))

    ini = tmp_path / "azqr.ini"
    ini.write_text("[azqr]\n")
    with pytest.raises(ConfigurationError):
        ConfigurationLoader().load_configuration(str(ini))


def test_yaml_scalars_are_coerced(tmp_path):
    path = tmp_path / "azqr.yaml"
    path.write_text(
        'parallel_workers: "4"\n'
        'mask_subscriptions: "false"\n'
        "services: kv, st\n"
    )

    config = ConfigurationLoader().load_configuration(str(path))

    assert config.parallel_workers == 4
    assert config.mask_subscriptions is False
    assert config.services == ["kv", "st"]


@pytest.mark.parametrize("line", [
    'parallel_workers: "many"\n',
    "plugin_workers: true\n",
    "mask_subscriptions: maybe\n",
])
def test_invalid_yaml_values_are_configuration_errors(tmp_path, line):
    path = tmp_path / "azqr.yaml"
    path.write_text(line)

    with pytest.raises(ConfigurationError):
        ConfigurationLoader().load_configuration(str(path))
