"""Unit tests for TODO marker scanning of a single file."""

import pytest

from ye_olde_todos.errors import BinaryFileError, FileUnreadableError
from ye_olde_todos.indexing.marker_scanner import line_has_marker, scan_file
from ye_olde_todos.models import TodoLocation


class TestLineHasMarker:
    @pytest.mark.parametrize(
        "line",
        [
            "// TODO: handle errors",
            "// TODO handle errors",
            "x = 1  # TODO: remove",
            "    # TODO",
            'print("# TODO inside a string")',
        ],
    )
    def test_matches_slash_and_hash_forms(self, line):
        assert line_has_marker(line)

    @pytest.mark.parametrize(
        "line",
        [
            "# todo: lowercase",
            "//TODO no space",
            "TODO without comment prefix",
            "# FIXME: other marker",
        ],
    )
    def test_rejects_other_forms(self, line):
        assert not line_has_marker(line)

    def test_custom_markers(self):
        assert line_has_marker("-- TODO: sql", markers=["-- TODO"])
        assert not line_has_marker("# TODO: py", markers=["-- TODO"])


class TestScanFile:
    def test_yields_trimmed_lines_with_one_based_numbers(self, tmp_path):
        source = tmp_path / "main.rs"
        source.write_text(
            "fn main() {\n"
            "    // TODO: test 2\n"
            "    let x = 1;\n"
            "    # TODO: not rust but still matched   \n"
            "}\n"
        )

        locations = list(scan_file(source))

        assert locations == [
            TodoLocation(path=source, line_number=2, text="// TODO: test 2"),
            TodoLocation(
                path=source, line_number=4, text="# TODO: not rust but still matched"
            ),
        ]

    def test_undecodable_lines_still_count(self, tmp_path):
        source = tmp_path / "mixed.py"
        source.write_bytes(
            b"# first line\n"
            b"bad = '\xff\xfe # TODO: invalid utf-8'\n"
            b"ok = 1\n"
            b"# TODO: after the bad line\n"
        )

        locations = list(scan_file(source))

        assert [(loc.line_number, loc.text) for loc in locations] == [
            (4, "# TODO: after the bad line")
        ]

    def test_crlf_line_endings_are_trimmed(self, tmp_path):
        source = tmp_path / "win.py"
        source.write_bytes(b"a = 1\r\n# TODO: windows\r\n")

        locations = list(scan_file(source))

        assert locations[0].line_number == 2
        assert locations[0].text == "# TODO: windows"

    def test_binary_file_is_reported(self, tmp_path):
        blob = tmp_path / "image.bin"
        blob.write_bytes(b"\x89PNG\x00\x00# TODO: not really\n")
        locations = []

        with pytest.raises(BinaryFileError) as exc_info:
            locations.extend(scan_file(blob))

        assert locations == []
        assert exc_info.value.path == blob
        assert isinstance(exc_info.value, FileUnreadableError)

    def test_file_without_markers(self, tmp_path):
        source = tmp_path / "clean.py"
        source.write_text("print('hello')\n")

        assert list(scan_file(source)) == []

    def test_missing_file_raises_unreadable(self, tmp_path):
        missing = tmp_path / "gone.py"

        with pytest.raises(FileUnreadableError) as exc_info:
            list(scan_file(missing))

        assert exc_info.value.path == missing
        assert isinstance(exc_info.value.cause, OSError)

    def test_scan_is_lazy(self, tmp_path):
        missing = tmp_path / "gone.py"

        # Nothing is opened until iteration starts
        generator = scan_file(missing)

        with pytest.raises(FileUnreadableError):
            next(generator)
