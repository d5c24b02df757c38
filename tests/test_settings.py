import json
from pathlib import Path

import pytest

from toolport.settings import SettingScope, SettingsError, load_settings, merge_settings, resolve_env_vars


def write_settings(directory, data):
    path = directory / ".toolport" / "settings.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


@pytest.fixture
def dirs(tmp_path):
    home = tmp_path / "home"
    workspace = tmp_path / "project"
    home.mkdir()
    workspace.mkdir()
    return home, workspace


def test_no_files_means_empty_settings(dirs):
    home, workspace = dirs
    loaded = load_settings(workspace, home_dir=home)
    assert loaded.merged == {}


def test_workspace_overrides_user_and_nested_dicts_merge(dirs):
    home, workspace = dirs
    write_settings(home, {"tools": {"core": ["echo"], "approvalMode": "default"}, "theme": "dark"})
    write_settings(workspace, {"tools": {"approvalMode": "auto_edit"}})

    loaded = load_settings(workspace, home_dir=home)

    assert loaded.merged == {
        "tools": {"core": ["echo"], "approvalMode": "auto_edit"},
        "theme": "dark",
    }
    assert loaded.for_scope(SettingScope.USER).settings["theme"] == "dark"


def test_system_settings_take_precedence(dirs, tmp_path, monkeypatch):
    home, workspace = dirs
    system_path = tmp_path / "system.json"
    system_path.write_text(json.dumps({"tools": {"exclude": ["read_file"]}}))
    monkeypatch.setenv("TOOLPORT_SYSTEM_SETTINGS_PATH", str(system_path))
    write_settings(workspace, {"tools": {"exclude": []}})

    loaded = load_settings(workspace, home_dir=home)

    assert loaded.merged["tools"]["exclude"] == ["read_file"]
    assert loaded.system.path == system_path


def test_workspace_equal_to_home_is_not_applied_twice(dirs):
    home, _ = dirs
    write_settings(home, {"a": 1})
    loaded = load_settings(home, home_dir=home)
    assert loaded.user.settings == {"a": 1}
    assert loaded.workspace.settings == {}


def test_invalid_json_raises(dirs):
    home, workspace = dirs
    path = write_settings(workspace, "{not json")
    with pytest.raises(SettingsError) as exc_info:
        load_settings(workspace, home_dir=home)
    assert exc_info.value.path == path
    assert "invalid JSON" in str(exc_info.value)


def test_non_object_settings_raise(dirs):
    home, workspace = dirs
    write_settings(home, [1, 2, 3])
    with pytest.raises(SettingsError, match="JSON object"):
        load_settings(workspace, home_dir=home)


def test_env_vars_are_resolved(dirs, monkeypatch):
    home, workspace = dirs
    monkeypatch.setenv("TOOL_NAME", "echo")
    write_settings(workspace, {"tools": {"core": ["$TOOL_NAME", "${TOOL_NAME}_2", "$UNSET_TOOLPORT_VAR"]}})

    loaded = load_settings(workspace, home_dir=home)

    assert loaded.merged["tools"]["core"] == ["echo", "echo_2", "$UNSET_TOOLPORT_VAR"]


def test_merge_settings_does_not_mutate_inputs():
    base = {"a": {"b": 1}}
    merged = merge_settings(base, {"a": {"c": 2}})
    assert merged == {"a": {"b": 1, "c": 2}}
    assert base == {"a": {"b": 1}}


def test_resolve_env_vars_leaves_non_strings(monkeypatch):
    monkeypatch.setenv("X", "1")
    assert resolve_env_vars({"n": 3, "flag": True, "s": "$X"}) == {"n": 3, "flag": True, "s": "1"}


def test_settings_path_that_is_a_directory_raises(dirs):
    home, workspace = dirs
    (workspace / ".toolport" / "settings.json").mkdir(parents=True)
    with pytest.raises(SettingsError) as exc_info:
        load_settings(workspace, home_dir=home)
    assert exc_info.value.path == workspace.resolve() / ".toolport" / "settings.json"


def test_unreadable_settings_file_raises(dirs, monkeypatch):
    home, workspace = dirs
    path = write_settings(workspace, {"a": 1})
    real_read_text = Path.read_text

    def read_text(self, *args, **kwargs):
        if self == path.resolve():
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_text(self, *args, **kwargs)

    monkeypatch.setattr(Path, "read_text", read_text)

    with pytest.raises(SettingsError, match="Permission denied"):
        load_settings(workspace, home_dir=home)
