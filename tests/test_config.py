"""
Tests for treestate.config module.
"""

import pytest


class TestConfigLoader:
    """Tests for configuration loading."""

    def test_load_config_from_file(self, tmp_path):
        """Values from .treestate.toml override the defaults."""
        from treestate.config.loader import load_config

        config_file = tmp_path / ".treestate.toml"
        config_file.write_text('[state]\ncollapsed = false\n\n[ids]\nprefix = "n-"\n')

        config = load_config(config_file)

        assert config["state"]["collapsed"] is False
        assert config["ids"]["prefix"] == "n-"

    def test_load_config_with_defaults(self, tmp_path):
        """Minimal config merges with defaults."""
        from treestate.config.loader import load_config

        config_file = tmp_path / ".treestate.toml"
        config_file.write_text("[render]\nindent = 4")

        config = load_config(config_file)

        assert config["render"]["indent"] == 4
        assert config["render"]["label_field"] == "text"
        assert config["state"]["hidden"] is False
        assert "logging" in config

    def test_load_config_returns_plain_types(self, tmp_path):
        from treestate.config.loader import load_config

        config_file = tmp_path / ".treestate.toml"
        config_file.write_text('[render]\nlabel_field = "title"')

        config = load_config(config_file)

        assert type(config["render"]["label_field"]) is str

    def test_invalid_toml(self, tmp_path):
        from treestate.config import ConfigError
        from treestate.config.loader import load_config

        config_file = tmp_path / ".treestate.toml"
        config_file.write_text("[state\ncollapsed = ")

        with pytest.raises(ConfigError, match="Invalid config file"):
            load_config(config_file)

    def test_find_config_file(self, tmp_path):
        from treestate.config.loader import find_config_file

        (tmp_path / ".treestate.toml").write_text("")
        config_path = find_config_file(tmp_path)
        assert config_path is not None
        assert config_path.name == ".treestate.toml"

    def test_find_config_file_not_found(self, tmp_path):
        from treestate.config.loader import find_config_file

        assert find_config_file(tmp_path) is None

    def test_find_config_in_parent(self, tmp_path):
        from treestate.config.loader import find_config_file

        (tmp_path / ".treestate.toml").write_text("")
        nested = tmp_path / "data" / "trees"
        nested.mkdir(parents=True)

        config_path = find_config_file(nested)
        assert config_path is not None
        assert config_path.parent == tmp_path.resolve()


class TestConfigMerge:
    """Tests for configuration merging."""

    def test_merge_configs_override(self):
        from treestate.config.loader import merge_configs

        defaults = {"render": {"indent": 2, "label_field": "text"}, "ids": {"prefix": ""}}
        user = {"render": {"indent": 4}}

        merged = merge_configs(defaults, user)

        assert merged["render"] == {"indent": 4, "label_field": "text"}
        assert merged["ids"] == {"prefix": ""}

    def test_merge_does_not_mutate_inputs(self):
        from treestate.config.loader import merge_configs

        defaults = {"render": {"indent": 2}}
        merge_configs(defaults, {"render": {"indent": 8}, "extra": {"k": 1}})

        assert defaults == {"render": {"indent": 2}}

    def test_merge_adds_new_sections(self):
        from treestate.config.loader import merge_configs

        merged = merge_configs({"a": {"x": 1}}, {"b": {"y": 2}})
        assert merged == {"a": {"x": 1}, "b": {"y": 2}}


class TestGetConfig:
    def test_defaults_without_file(self, tmp_path):
        from treestate.config import DEFAULT_CONFIG, get_config

        config = get_config(start=tmp_path, environ={})
        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG

    def test_explicit_path(self, tmp_path):
        from treestate.config import get_config

        path = tmp_path / "custom.toml"
        path.write_text("[events]\nhistory = false")

        config = get_config(path, environ={})
        assert config["events"]["history"] is False

    def test_discovered_file(self, tmp_path):
        from treestate.config import get_config

        (tmp_path / ".treestate.toml").write_text('[logging]\nlevel = "DEBUG"')
        config = get_config(start=tmp_path, environ={})
        assert config["logging"]["level"] == "DEBUG"


class TestTreeStateFromConfig:
    def test_wires_defaults_and_prefix(self):
        from treestate.config import DEFAULT_CONFIG, merge_configs
        from treestate.tree import TreeState

        config = merge_configs(
            DEFAULT_CONFIG,
            {"state": {"collapsed": False}, "ids": {"prefix": "cfg-"}, "events": {"history": False}},
        )
        tree = TreeState.from_config(config)
        node = tree.add_node({})

        assert node.state.collapsed is False
        assert node.id.startswith("cfg-")
        assert tree.events.log is None

    def test_rejects_selected_default(self):
        """A selected default would select every loaded node at once."""
        from treestate.config import DEFAULT_CONFIG, ConfigError, merge_configs
        from treestate.tree import TreeState

        config = merge_configs(DEFAULT_CONFIG, {"state": {"selected": True}})
        with pytest.raises(ConfigError, match="selected"):
            TreeState.from_config(config)

    def test_selected_false_accepted(self):
        from treestate.config import DEFAULT_CONFIG, merge_configs
        from treestate.tree import TreeState

        tree = TreeState.from_config(merge_configs(DEFAULT_CONFIG, {"state": {"selected": False}}))
        model = tree.load([{"id": "a"}, {"id": "b"}]).result()
        assert [n.id for n in model.all_nodes() if n.state.selected] == []


class TestValidateConfig:
    def test_defaults_are_valid(self):
        from treestate.config import DEFAULT_CONFIG, validate_config

        validate_config(DEFAULT_CONFIG)
        assert "selected" not in DEFAULT_CONFIG["state"]

    def test_non_boolean_flag(self):
        from treestate.config import ConfigError, validate_config

        with pytest.raises(ConfigError, match="collapsed must be a boolean"):
            validate_config({"state": {"collapsed": "yes"}})

    def test_selected_in_file_rejected(self, tmp_path):
        from treestate.config import ConfigError, get_config

        path = tmp_path / ".treestate.toml"
        path.write_text("[state]\nselected = true\n")

        with pytest.raises(ConfigError, match="selected"):
            get_config(path, environ={})

    def test_selected_from_env_rejected(self, tmp_path):
        from treestate.config import ConfigError, get_config

        with pytest.raises(ConfigError, match="selected"):
            get_config(start=tmp_path, environ={"TREESTATE_STATE_SELECTED": "true"})
