"""Unit tests for config.py"""

import logging
from pathlib import Path

import pytest

from pretty import config
from pretty.config import (
    DEFAULTS,
    FLAG_FIELDS,
    OPTIONAL_FIELDS,
    PATH_FIELDS,
    STRING_FIELDS,
    Settings,
    get_config_dir,
    load_config,
    merge_settings,
)
from pretty.errors import ConfigDirNotFound


def _write(directory: Path, text: str, name: str = "pretty.yaml") -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    path.write_text(text)
    return path


# --- merge_settings ---

def test_field_groups_cover_every_setting():
    """Each Settings field belongs to exactly one merge group."""
    groups = STRING_FIELDS + PATH_FIELDS + FLAG_FIELDS + OPTIONAL_FIELDS
    assert sorted(groups) == sorted(Settings.model_fields)


@pytest.mark.parametrize("field", STRING_FIELDS)
def test_merge_string_prefers_non_empty_self(field):
    merged = merge_settings(Settings(**{field: "high"}), Settings(**{field: "low"}))
    assert getattr(merged, field) == "high"


@pytest.mark.parametrize("field", STRING_FIELDS)
def test_merge_string_falls_back_when_self_empty(field):
    merged = merge_settings(Settings(), Settings(**{field: "low"}))
    assert getattr(merged, field) == "low"


@pytest.mark.parametrize("field", PATH_FIELDS)
def test_merge_path(field):
    """A set path wins; an unset one falls back to the lower layer."""
    assert getattr(merge_settings(Settings(**{field: "/a"}), Settings(**{field: "/b"})), field) == Path("/a")
    assert getattr(merge_settings(Settings(), Settings(**{field: "/b"})), field) == Path("/b")


@pytest.mark.parametrize("field", OPTIONAL_FIELDS)
def test_merge_optional(field):
    assert getattr(merge_settings(Settings(**{field: "x"}), Settings(**{field: "y"})), field) == "x"
    assert getattr(merge_settings(Settings(), Settings(**{field: "y"})), field) == "y"
    assert getattr(merge_settings(Settings(), Settings()), field) is None


@pytest.mark.parametrize("field", FLAG_FIELDS)
@pytest.mark.parametrize("mine,theirs,expected", [
    (False, False, False),
    (True,  False, True),
    (False, True,  True),
    (True,  True,  True),
])
def test_merge_flags_are_or(field, mine, theirs, expected):
    merged = merge_settings(Settings(**{field: mine}), Settings(**{field: theirs}))
    assert getattr(merged, field) is expected


def test_merge_over_defaults_keeps_defaults_for_unset_fields():
    merged = merge_settings(Settings(title="Mine"), DEFAULTS)
    assert merged.title == "Mine"
    assert merged.font == "Ubuntu"
    assert merged.toc_title == "Table of Contents"
    assert merged.output_file_name == "pretty"


# --- load_config ---

def test_load_config_defaults(config_dir):
    """Without any config file the compiled-in defaults apply."""
    settings = load_config()
    assert settings.title == "Pretty Document"
    assert settings.font == "Ubuntu"
    assert settings.toc_title == "Table of Contents"
    assert settings.output_file_name == "pretty"
    assert settings.show is False and settings.keep is False and settings.hedgedoc is False
    assert settings.domain is None and settings.document_id is None
    assert settings.config_dir == config_dir
    assert settings.config_file == config_dir / "pretty.yaml"


def test_load_config_reads_user_file(config_dir):
    _write(config_dir, "title: User Title\nauthor: Ada\n")
    settings = load_config()
    assert settings.title == "User Title"
    assert settings.author == "Ada"
    assert settings.font == "Ubuntu"


def test_load_config_cwd_file_overrides_user_file(config_dir, tmp_path):
    _write(config_dir, "title: User Title\nfont: Fira Sans\n")
    _write(tmp_path, "title: Project Title\n")
    settings = load_config()
    assert settings.title == "Project Title"
    assert settings.font == "Fira Sans"


def test_load_config_cwd_file_missing_keys_keep_user_values(config_dir, tmp_path):
    """Keys absent from the local file do not reset values from the user file."""
    _write(config_dir, "title: User Title\ndomain: https://md.example.org\n")
    _write(tmp_path, "font: Noto Serif\n")
    settings = load_config()
    assert settings.title == "User Title"
    assert settings.domain == "https://md.example.org"
    assert settings.font == "Noto Serif"


def test_load_config_cli_overrides_files(config_dir, tmp_path):
    _write(config_dir, "title: User Title\n")
    _write(tmp_path, "title: Project Title\n")
    settings = load_config(overrides={"title": "CLI Title"})
    assert settings.title == "CLI Title"


def test_load_config_none_overrides_do_not_clobber(tmp_path):
    _write(tmp_path, "title: Project Title\ndocument_id: abc\n")
    settings = load_config(overrides={"title": None, "document_id": None, "show": None})
    assert settings.title == "Project Title"
    assert settings.document_id == "abc"
    assert settings.show is False


def test_load_config_flag_from_file_survives_absent_cli_flag(config_dir):
    _write(config_dir, "show: true\n")
    assert load_config(overrides={"show": None}).show is True


def test_load_config_accepts_yml_extension(config_dir):
    path = _write(config_dir, "title: From yml\n", name="pretty.yml")
    settings = load_config()
    assert settings.title == "From yml"
    assert settings.config_file == path


def test_load_config_ignores_unknown_keys(tmp_path):
    _write(tmp_path, "title: Known\nnot_a_setting: 42\n")
    assert load_config().title == "Known"


def test_load_config_file_cannot_relocate_config_dir(config_dir, tmp_path):
    _write(tmp_path, f"config_dir: {tmp_path / 'elsewhere'}\n")
    assert load_config().config_dir == config_dir


@pytest.mark.parametrize("text", [
    "title: [unclosed\n",
    "- just\n- a list\n",
    "show: [1, 2]\n",
])
def test_load_config_skips_broken_cwd_file(config_dir, tmp_path, caplog, text):
    """A malformed local file is skipped with a warning; the user file still applies."""
    _write(config_dir, "title: User Title\n")
    _write(tmp_path, text)
    with caplog.at_level(logging.WARNING, logger="pretty.config"):
        settings = load_config()
    assert settings.title == "User Title"
    assert "Ignoring config file" in caplog.text


def test_load_config_skips_broken_user_file(config_dir, tmp_path):
    _write(config_dir, "title: [unclosed\n")
    _write(tmp_path, "font: Noto Serif\n")
    settings = load_config()
    assert settings.title == "Pretty Document"
    assert settings.font == "Noto Serif"


def test_load_config_numeric_values_become_strings(config_dir):
    """`document_id: 12345` is read as text instead of rejecting the whole file."""
    _write(config_dir, "domain: https://md.example.org\ndocument_id: 12345\ntitle: Mine\n")
    settings = load_config()
    assert settings.domain == "https://md.example.org"
    assert settings.document_id == "12345"
    assert settings.title == "Mine"


def test_load_config_blank_key_falls_back(config_dir, tmp_path):
    """A key with no value is empty; the rest of the file still applies."""
    _write(config_dir, "title: User Title\n")
    _write(tmp_path, "title:\nfont: Fira Sans\nauthor:\n")
    settings = load_config()
    assert settings.title == "User Title"
    assert settings.font == "Fira Sans"
    assert settings.author is None


def test_load_config_empty_path_falls_back(config_dir, tmp_path):
    docs = tmp_path / "docs"
    _write(config_dir, f"output_dir: {docs}\n")
    _write(tmp_path, 'output_dir: ""\ninput_path: ""\n')
    settings = load_config()
    assert settings.output_dir == docs
    assert settings.input_path is None


@pytest.mark.parametrize("field", PATH_FIELDS)
def test_merge_empty_path_string_is_unset(field):
    merged = merge_settings(Settings(**{field: ""}), Settings(**{field: "/b"}))
    assert getattr(merged, field) == Path("/b")


@pytest.mark.parametrize("field", OPTIONAL_FIELDS)
def test_merge_blank_optional_is_unset(field):
    merged = merge_settings(Settings(**{field: "  "}), Settings(**{field: "y"}))
    assert getattr(merged, field) == "y"


def test_load_config_empty_file_is_a_no_op(config_dir):
    _write(config_dir, "")
    assert load_config().title == "Pretty Document"


def test_load_config_expands_user_paths(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    _write(tmp_path, "output_dir: ~/out\n")
    assert load_config().output_dir == tmp_path / "out"


def test_load_config_explicit_dirs(tmp_path):
    user_dir = tmp_path / "u"
    project = tmp_path / "p"
    _write(user_dir, "title: U\n")
    _write(project, "font: P\n")
    settings = load_config(config_dir=user_dir, cwd=project)
    assert (settings.title, settings.font) == ("U", "P")


# --- get_config_dir ---

def test_get_config_dir_uses_env(config_dir):
    assert get_config_dir() == config_dir


def test_get_config_dir_falls_back_to_app_dir(tmp_path, monkeypatch):
    monkeypatch.delenv("PRETTY_CONFIG_DIR")
    monkeypatch.setattr(config.typer, "get_app_dir", lambda name: str(tmp_path / name))
    assert get_config_dir() == tmp_path / "pretty"


def test_get_config_dir_not_found(monkeypatch):
    """An unexpanded home directory means there is no per-user config location."""
    monkeypatch.delenv("PRETTY_CONFIG_DIR")
    monkeypatch.setattr(config.typer, "get_app_dir", lambda name: "~/.config/pretty")
    with pytest.raises(ConfigDirNotFound):
        get_config_dir()
    with pytest.raises(ConfigDirNotFound):
        load_config()
