"""Tests for footprint persistence and strategies."""

import pytest

from skipgate import footprint
from skipgate.config import SkipGateConfig
from skipgate.errors import ConfigurationError, IOFailure
from skipgate.footprint import StaticFootprintStrategy, get_footprint_strategy


def test_save_then_load_keeps_trailing_empty_member(tmp_path):
    path = tmp_path / "filelist.txt"
    footprint.save(path, ["a", "b"])

    assert path.read_text() == "a\nb\n"
    assert footprint.load(path) - {""} == {"a", "b"}


def test_save_overwrites_previous_footprint(tmp_path):
    path = tmp_path / "filelist.txt"
    footprint.save(path, ["Gemfile", "main.rb"])
    footprint.save(path, ["Gemfile.lock"])

    assert footprint.load(path) == {"Gemfile.lock", ""}


def test_empty_footprint_round_trips_to_empty_string_only(tmp_path):
    path = tmp_path / "filelist.txt"
    footprint.save(path, [])
    assert footprint.load(path) == {""}


def test_load_missing_file_raises_io_failure(tmp_path):
    with pytest.raises(IOFailure):
        footprint.load(tmp_path / "missing.txt")


def test_save_into_missing_directory_raises_io_failure(tmp_path):
    with pytest.raises(IOFailure):
        footprint.save(tmp_path / "nope" / "filelist.txt", ["a"])


def test_static_strategy_reports_existing_candidates(tmp_path):
    (tmp_path / "Gemfile").write_text("source 'https://rubygems.org'\n")
    (tmp_path / "main.rb").write_text("puts 'hi'\n")

    strategy = StaticFootprintStrategy()
    assert strategy.collect(tmp_path) == ["main.rb", "Gemfile"]


def test_get_footprint_strategy_uses_configured_candidates():
    config = SkipGateConfig(footprint={"candidates": ["pyproject.toml"]})
    strategy = get_footprint_strategy(config)
    assert isinstance(strategy, StaticFootprintStrategy)
    assert strategy.candidates == ["pyproject.toml"]


def test_get_footprint_strategy_rejects_unknown_strategy():
    config = SkipGateConfig()
    config.footprint.strategy = "trace"
    with pytest.raises(ConfigurationError):
        get_footprint_strategy(config)


def test_load_undecodable_file_raises_io_failure(tmp_path):
    path = tmp_path / "filelist.txt"
    path.write_bytes(b"\xff\xfe\n")
    with pytest.raises(IOFailure):
        footprint.load(path)


def test_save_unencodable_name_raises_io_failure(tmp_path):
    with pytest.raises(IOFailure):
        footprint.save(tmp_path / "filelist.txt", ["bad\udcffname"])
