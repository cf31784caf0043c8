import pytest

from lcat.config import ConfigError, LcatConfig, load_config_from_path
from lcat.test_utils import WorkspaceFactory


def test_loads_tool_table_from_pyproject(tmp_path):
    root = (
        WorkspaceFactory(tmp_path)
        .with_project_name("game")
        .with_config({"directory": "src", "jobs": 2, "base_url": "/api/"})
        .build()
    )

    config = load_config_from_path(root)

    assert config.directory == "src"
    assert config.jobs == 2
    assert config.base_url == "/api/"
    assert config.output_dir == "docs"
    assert config.strict is False
    assert config.root_path == root.resolve()


def test_lcat_toml_wins_over_pyproject(tmp_path):
    root = (
        WorkspaceFactory(tmp_path)
        .with_config({"directory": "from_pyproject"})
        .with_lcat_toml({"directory": "from_lcat_toml"})
        .build()
    )
    assert load_config_from_path(root).directory == "from_lcat_toml"


def test_search_walks_up_past_unrelated_pyproject(tmp_path):
    WorkspaceFactory(tmp_path).with_config({"files": ["main.lua"]}).build()
    nested = tmp_path / "tools" / "sub"
    nested.mkdir(parents=True)
    (tmp_path / "tools" / "pyproject.toml").write_text(
        '[project]\nname = "tools"\n', encoding="utf-8"
    )

    config = load_config_from_path(nested)

    assert config.files == ["main.lua"]
    assert config.root_path == tmp_path.resolve()


def test_single_file_string_becomes_a_list(tmp_path):
    WorkspaceFactory(tmp_path).with_lcat_toml({"files": "main.lua"}).build()
    assert load_config_from_path(tmp_path).files == ["main.lua"]


@pytest.mark.parametrize("jobs", [0, -1, "4"])
def test_invalid_jobs(tmp_path, jobs):
    WorkspaceFactory(tmp_path).with_lcat_toml({"jobs": jobs}).build()
    with pytest.raises(ConfigError):
        load_config_from_path(tmp_path)


def test_broken_toml(tmp_path):
    (tmp_path / "lcat.toml").write_text("directory = ", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config_from_path(tmp_path)


def test_unknown_keys_are_ignored(tmp_path, caplog):
    WorkspaceFactory(tmp_path).with_lcat_toml({"colour": "blue"}).build()

    config = load_config_from_path(tmp_path)

    assert config.directory is None
    assert "colour" in caplog.text


def test_override_only_replaces_given_values(tmp_path):
    config = LcatConfig(directory="src", jobs=1, root_path=tmp_path)

    overridden = config.override(directory=None, jobs=4, files=None)

    assert overridden.directory == "src"
    assert overridden.jobs == 4
    assert overridden.files == []
    assert overridden.output_path == tmp_path / "docs"
