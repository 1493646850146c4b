import json

import pytest
import yaml

from yolo_prep.core.errors import ConfigError
from yolo_prep.services import ConfigService, MemoryLogger


@pytest.fixture
def config_service(tmp_path):
    return ConfigService(MemoryLogger(), config_dir=tmp_path / "cfg")


def _job(tmp_path, **overrides):
    job = {"sources": [str(tmp_path / "src")], "output_dir": str(tmp_path / "out"), "classes": ["hole", "nut"]}
    job.update(overrides)
    return job


def test_yaml_job_gets_defaults(tmp_path, config_service):
    path = tmp_path / "job.yaml"
    path.write_text(yaml.safe_dump(_job(tmp_path)), encoding="utf-8")

    config = config_service.load_build_config(path)

    assert config.classes == ["hole", "nut"]
    assert config.process_images is True
    assert config.max_kb == 500
    assert (config.train_ratio, config.val_ratio) == (0.8, 0.2)
    assert config.seed is None
    assert config.max_workers == 4


def test_json_job_and_comma_separated_classes(tmp_path, config_service):
    path = tmp_path / "job.json"
    path.write_text(json.dumps(_job(tmp_path, classes=" hole, nut ", process_images=False, seed=7)), encoding="utf-8")

    config = config_service.load_build_config(path)
    plan = config.to_plan()

    assert plan.class_map == {"hole": 0, "nut": 1}
    assert plan.process_images is False
    assert plan.seed == 7


@pytest.mark.parametrize("classes", ["hole, nut,", "hole, nut, ,", ["hole", "nut", ""]])
def test_trailing_blank_classes_are_dropped(tmp_path, config_service, classes):
    config = config_service.build_config_from_dict(_job(tmp_path, classes=classes))
    assert config.classes == ["hole", "nut"]
    assert config.to_plan().class_map == {"hole": 0, "nut": 1}


def test_single_source_string_is_accepted(tmp_path, config_service):
    config = config_service.build_config_from_dict(_job(tmp_path, sources=str(tmp_path / "src")))
    assert config.sources == [str(tmp_path / "src")]


@pytest.mark.parametrize("overrides", [
    {"sources": []},
    {"output_dir": ""},
    {"classes": []},
    {"classes": ""},
    {"classes": "hole,,nut"},
    {"classes": ["hole", "hole"]},
    {"max_kb": -1},
    {"max_workers": 0},
    {"train_ratio": "most"},
])
def test_invalid_jobs_raise_config_error(tmp_path, config_service, overrides):
    with pytest.raises(ConfigError):
        config_service.build_config_from_dict(_job(tmp_path, **overrides))


def test_missing_keys_raise_config_error(tmp_path, config_service):
    with pytest.raises(ConfigError):
        config_service.build_config_from_dict({"classes": ["x"]})


def test_missing_or_bad_job_file(tmp_path, config_service):
    with pytest.raises(ConfigError):
        config_service.load_build_config(tmp_path / "nope.yaml")

    bad = tmp_path / "bad.yaml"
    bad.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        config_service.load_build_config(bad)


def test_persisted_defaults_apply_to_later_jobs(tmp_path):
    logger = MemoryLogger()
    first = ConfigService(logger, config_dir=tmp_path / "cfg")
    first.set_setting("max_kb", 120)
    first.set_setting("train_ratio", 0.7)
    first.set_setting("no_such_key", 1)
    assert first.save_defaults()

    second = ConfigService(logger, config_dir=tmp_path / "cfg")
    config = second.build_config_from_dict(_job(tmp_path))

    assert second.get_setting("max_kb") == 120
    assert config.max_kb == 120
    assert config.train_ratio == 0.7
    assert any("no_such_key" in e["message"] for e in logger.get_entries("WARNING"))


def test_job_values_override_defaults(tmp_path, config_service):
    config_service.set_setting("max_kb", 120)
    config = config_service.build_config_from_dict(_job(tmp_path, max_kb=900))
    assert config.max_kb == 900
