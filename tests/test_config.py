import pytest

from toolport.config import ApprovalMode, CliArgs, get_version, load_cli_config


def names(config):
    return config.create_tool_registry().get_all_tool_names()


def test_default_config_is_non_privileged(make_config, tmp_path):
    config = make_config()
    assert config.approval_mode is ApprovalMode.DEFAULT
    assert config.target_dir == tmp_path.resolve()
    assert names(config) == ["echo", "calculate", "convert_units", "list_directory", "read_file"]


@pytest.mark.parametrize("argv,settings", [
    ({"yolo": True}, {}),
    ({"approval_mode": "auto_edit"}, {}),
    ({}, {"tools": {"approvalMode": "yolo"}}),
])
def test_write_file_enabled_when_edits_are_approved(make_config, argv, settings):
    assert names(make_config(settings, **argv))[-1] == "write_file"


def test_yolo_flag_beats_settings(make_config):
    config = make_config({"tools": {"approvalMode": "default"}}, yolo=True)
    assert config.approval_mode is ApprovalMode.YOLO


def test_invalid_approval_mode(make_config):
    with pytest.raises(ValueError, match="Invalid approval mode"):
        make_config({"tools": {"approvalMode": "sometimes"}})


def test_core_tools_allowlist(make_config):
    assert names(make_config({"tools": {"core": ["read_file", "echo"]}})) == ["echo", "read_file"]


def test_empty_core_list_disables_everything(make_config):
    assert names(make_config({"tools": {"core": []}})) == []


def test_exclude_tools_from_settings_and_args(make_config):
    config = make_config({"tools": {"exclude": ["calculate"]}}, exclude_tools=["echo"])
    assert names(config) == ["convert_units", "list_directory", "read_file"]


def test_cli_core_tools_override_settings(make_config):
    config = make_config({"tools": {"core": ["echo"]}}, core_tools=["calculate"])
    assert names(config) == ["calculate"]


def test_malformed_tool_lists_rejected(make_config):
    with pytest.raises(ValueError, match="tools.exclude"):
        make_config({"tools": {"exclude": "echo"}})
    with pytest.raises(ValueError, match="'tools' must be an object"):
        make_config({"tools": ["echo"]})


def test_registry_is_fresh_each_time(make_config):
    config = make_config()
    assert config.create_tool_registry() is not config.create_tool_registry()


def test_session_id_is_carried(tmp_path):
    config = load_cli_config({}, "abc", CliArgs(), tmp_path)
    assert config.session_id == "abc"


def test_get_version_prefers_env(monkeypatch):
    monkeypatch.setenv("TOOLPORT_VERSION", "7.0.0")
    assert get_version() == "7.0.0"


def test_get_version_none_when_not_installed(monkeypatch):
    from importlib import metadata

    def not_found(name):
        raise metadata.PackageNotFoundError(name)

    monkeypatch.setattr(metadata, "version", not_found)
    assert get_version() is None


def test_allowed_tools_extend_settings_allowlist(make_config):
    config = make_config({"tools": {"core": ["echo", "read_file"]}}, allowed_tools=["calculate", "echo"])
    assert config.core_tools == ["echo", "read_file", "calculate"]
    assert names(config) == ["echo", "calculate", "read_file"]


def test_allowed_tools_extend_cli_allowlist(make_config):
    config = make_config({"tools": {"core": ["echo"]}}, core_tools=["read_file"], allowed_tools=["calculate"])
    assert names(config) == ["calculate", "read_file"]


def test_allowed_tools_without_allowlist_keep_everything(make_config):
    config = make_config(allowed_tools=["echo"])
    assert config.core_tools is None
    assert "convert_units" in names(config)
