"""Unit tests for path normalization and the existence check."""

import pytest

from backuplist.path_filter import PathFilter, clean, join_path, normalize_path, squeeze_separators


@pytest.mark.parametrize(
    "text,expected",
    [
        ("name\n", "name"),
        ("name\r\n", "name"),
        ("name\r", "name"),
        ("   name", "name"),
        ("\t name \n", "name "),
        ("name\n\n", "name\n"),
        ("", ""),
    ],
)
def test_clean(text, expected):
    """clean() drops one terminator and leading whitespace only."""
    assert clean(text) == expected


def test_clean_returns_new_string():
    original = "  value\n"
    cleaned = clean(original)
    assert original == "  value\n"
    assert cleaned == "value"


@pytest.mark.parametrize(
    "path,expected",
    [
        ("/a//b/../c", "/a/b/../c"),
        ("////", "/"),
        ("/srv/data", "/srv/data"),
        ("relative//path/", "relative/path/"),
    ],
)
def test_squeeze_separators(path, expected):
    assert squeeze_separators(path) == expected


def test_normalize_path_combines_clean_and_squeeze():
    assert normalize_path("  //srv//data//a.txt\n") == "/srv/data/a.txt"


def test_join_path_keeps_absolute_fragments():
    """An absolute fragment is appended rather than replacing the prefix."""
    assert join_path("/srv", "/data", "a.txt") == "/srv/data/a.txt"
    assert join_path("/srv/", "data") == "/srv/data"


def test_path_filter_accepts_existing_paths(tmp_path):
    target = tmp_path / "exists.txt"
    target.write_text("x")
    path_filter = PathFilter()

    assert path_filter.check(f"  {tmp_path}//exists.txt\n") == str(target)
    assert path_filter.checked_count == 1
    assert path_filter.missing_count == 0


def test_path_filter_rejects_missing_paths(tmp_path):
    path_filter = PathFilter()

    assert path_filter.check(str(tmp_path / "missing.txt")) is None
    assert path_filter.missing_count == 1


def test_path_filter_rejects_dangling_symlink(tmp_path):
    link = tmp_path / "dangling"
    link.symlink_to(tmp_path / "nowhere")

    assert PathFilter().check(str(link)) is None


def test_path_filter_accepts_directories(tmp_path):
    assert PathFilter().check(str(tmp_path) + "/") == str(tmp_path) + "/"
