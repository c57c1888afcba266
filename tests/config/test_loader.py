from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from release_tracker.config import ConfigLocator, ConfigRepository, GlobalConfig, SourceKind


def test_config_locator_uses_env_and_creates_directories(tmp_path: Path) -> None:
    locator = ConfigLocator()
    assert locator.project_root == tmp_path.resolve()
    for path in (locator.data_dir, locator.sources_dir, locator.logs_dir):
        assert path.exists()
    assert locator.global_config_path() == tmp_path.resolve() / "data" / "global_config.yaml"


def test_global_config_written_when_missing(temp_config_repository: ConfigRepository) -> None:
    config = temp_config_repository.load_global_config()
    assert config == GlobalConfig()
    assert temp_config_repository.locator.global_config_path().exists()


def test_global_config_round_trip(tmp_path: Path) -> None:
    repository = ConfigRepository(ConfigLocator(project_root=tmp_path))
    config = GlobalConfig(description_limit=300, adapter_workers=2)
    repository.save_global_config(config)

    fresh = ConfigRepository(ConfigLocator(project_root=tmp_path))
    assert fresh.load_global_config() == config


def test_global_config_overrides_from_yaml(temp_config_repository: ConfigRepository) -> None:
    path = temp_config_repository.locator.global_config_path()
    path.write_text(
        yaml.safe_dump(
            {
                "fetch": {"retries": 5},
                "classifier": {
                    "status_rules": [{"label": "alpha", "keywords": ["alpha"]}],
                },
            }
        ),
        encoding="utf-8",
    )
    config = temp_config_repository.load_global_config()
    assert config.fetch.retries == 5
    assert [rule.label for rule in config.classifier.status_rules] == ["alpha"]


def test_source_cycle(temp_config_repository: ConfigRepository, sample_source_config) -> None:
    source = sample_source_config(name="product-updates", display_name="Product Updates")
    path = temp_config_repository.save_source(source)
    assert path.name == "product-updates.yaml"
    assert temp_config_repository.load_source("product-updates") == source

    temp_config_repository.delete_source("product-updates")
    with pytest.raises(FileNotFoundError):
        temp_config_repository.load_source("product-updates")


def test_default_sources_seeded_when_empty(temp_config_repository: ConfigRepository) -> None:
    sources = temp_config_repository.list_sources()
    kinds = {source.kind for source in sources}
    assert kinds == {SourceKind.FEED, SourceKind.DOCUMENT, SourceKind.BROWSER}
    assert len(list(temp_config_repository.list_source_files())) == len(sources)


def test_existing_sources_are_not_reseeded(temp_config_repository: ConfigRepository, sample_source_config) -> None:
    temp_config_repository.save_source(sample_source_config(name="only"))
    assert [source.name for source in temp_config_repository.list_sources()] == ["only"]
