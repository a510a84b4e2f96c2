"""Tests for the class map and feature list readers."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from text_svm.lines import read_class_names, read_feature_names, travel_lines


class TestTravelLines:

    def test_splits_stripped_line(self):
        rows = list(travel_lines(io.StringIO("  a:b  \n"), ":"))
        assert rows == [("  a:b  ", ["a", "b"])]

    def test_skips_comments(self):
        rows = list(travel_lines(io.StringIO("# header\nx y\n"), " "))
        assert [fields for _, fields in rows] == [["x", "y"]]

    def test_comments_kept_when_requested(self):
        rows = list(travel_lines(io.StringIO("#a\n"), " ", skip_comments=False))
        assert rows == [("#a", ["#a"])]


class TestReadClassNames:

    def test_reads_names_in_order(self):
        stream = io.StringIO("spam:1\nham:2\neggs:3\n")
        assert read_class_names(stream) == ["spam", "ham", "eggs"]

    def test_names_are_trimmed(self):
        assert read_class_names(io.StringIO(" spam : 1\n")) == ["spam"]

    def test_comments_and_odd_lines_skipped(self):
        stream = io.StringIO("# name:index\nspam:1\nnocolon\na:b:c\n\nham:2\n")
        assert read_class_names(stream) == ["spam", "ham"]

    def test_binary_stream(self):
        assert read_class_names(io.BytesIO("体育:1\n财经:2\n".encode("utf-8"))) == ["体育", "财经"]

    def test_path_with_encoding(self, tmp_path: Path):
        path = tmp_path / "name.map"
        path.write_bytes("体育:1\n财经:2\n".encode("gbk"))
        assert read_class_names(path, encoding="gbk") == ["体育", "财经"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_class_names(tmp_path / "missing.map")


class TestReadFeatureNames:

    def test_one_name_per_line(self):
        assert read_feature_names(io.StringIO("buy\nnow\n")) == ["buy", "now"]

    def test_blank_lines_and_whitespace(self):
        assert read_feature_names(io.StringIO("  buy \n\n\t\nnow")) == ["buy", "now"]

    def test_comments_kept_by_default(self):
        assert read_feature_names(io.StringIO("#tag\nbuy\n")) == ["#tag", "buy"]

    def test_comments_skipped_when_requested(self):
        stream = io.BytesIO(b"# header\nbuy\nnow\n")
        assert read_feature_names(stream, skip_comments=True) == ["buy", "now"]

    def test_string_path(self, tmp_path: Path):
        path = tmp_path / "features.txt"
        path.write_text("降息\n股票\n", encoding="utf-8")
        assert read_feature_names(str(path)) == ["降息", "股票"]

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            read_feature_names(tmp_path / "missing.txt")
