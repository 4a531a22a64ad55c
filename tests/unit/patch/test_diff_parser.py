"""Unit tests for gitlines.patch.parser module."""

import pytest

from gitlines.core.errors import (
    DiffError,
    HunkCountMismatchError,
    MalformedHunkHeaderError,
    MissingFileHeaderError,
    OverlappingHunksError,
)
from gitlines.patch import parse_diff
from gitlines.patch.types import LineKind

SINGLE_ADDITION = """\
diff --git a/flake.nix b/flake.nix
index abc1234..def5678 100644
--- a/flake.nix
+++ b/flake.nix
@@ -136,0 +137 @@
+      debug = true;
"""

MIXED = """\
diff --git a/gtk.nix b/gtk.nix
index 2ce966d..93d8dbc 100644
--- a/gtk.nix
+++ b/gtk.nix
@@ -10,2 +10,3 @@ line 9
-    gtk.theme.name = "Adwaita";
-    gtk.iconTheme.name = "Papirus";
+    # Theme managed by Stylix
+    gtk.iconTheme.name = "Papirus-Dark";
+    gtk.cursorTheme.size = 24;
"""

NO_NEWLINE = """\
--- a/notes.txt
+++ b/notes.txt
@@ -2 +2,2 @@
-b
\\ No newline at end of file
+b
+c
\\ No newline at end of file
"""


class TestParseDiff:
    """Tests for parse_diff function."""

    @pytest.mark.parametrize("text", ["", "   \n", "\n\n"])
    def test_empty_input(self, text: str) -> None:
        assert len(parse_diff(text)) == 0

    def test_single_addition(self) -> None:
        diff = parse_diff(SINGLE_ADDITION)

        assert list(diff.files) == ["flake.nix"]
        file_diff = diff.get_file("flake.nix")
        assert file_diff is not None
        assert file_diff.headers == ["index abc1234..def5678 100644"]
        assert len(file_diff.hunks) == 1

        hunk = file_diff.hunks[0]
        assert (hunk.old_start, hunk.old_count) == (136, 0)
        assert (hunk.new_start, hunk.new_count) == (137, 1)
        assert len(hunk.lines) == 1
        line = hunk.lines[0]
        assert line.kind is LineKind.ADDITION
        assert line.content == "      debug = true;"
        assert line.new_lineno == 137
        assert line.old_lineno is None

    def test_mixed_hunk_numbering(self) -> None:
        hunk = parse_diff(MIXED).get_file("gtk.nix").hunks[0]

        assert hunk.section == "line 9"
        assert [line.old_lineno for line in hunk.deletions] == [10, 11]
        assert [line.new_lineno for line in hunk.additions] == [10, 11, 12]
        assert (hunk.old_count, hunk.new_count) == (2, 3)

    def test_multiple_files_keep_order(self) -> None:
        diff = parse_diff(SINGLE_ADDITION + MIXED)
        assert list(diff.files) == ["flake.nix", "gtk.nix"]

    def test_multiple_hunks_sorted_by_old_start(self) -> None:
        text = """\
--- a/f
+++ b/f
@@ -20 +20 @@
-x
+y
@@ -3,0 +4 @@
+z
"""
        hunks = parse_diff(text).get_file("f").hunks
        assert [h.old_start for h in hunks] == [3, 20]

    def test_no_newline_markers(self) -> None:
        hunk = parse_diff(NO_NEWLINE).get_file("notes.txt").hunks[0]

        assert [line.no_newline for line in hunk.deletions] == [True]
        assert [line.no_newline for line in hunk.additions] == [False, True]

    def test_body_lines_consumed_by_count(self) -> None:
        """A deleted line that looks like a file header stays content."""
        text = """\
--- a/f
+++ b/f
@@ -3 +2,0 @@
--- x
"""
        hunk = parse_diff(text).get_file("f").hunks[0]
        assert hunk.deletions[0].content == "-- x"

    def test_empty_line_is_context(self) -> None:
        text = "--- a/f\n+++ b/f\n@@ -1,2 +1,2 @@\n\n-x\n+y\n"
        hunk = parse_diff(text).get_file("f").hunks[0]

        assert hunk.lines[0].kind is LineKind.CONTEXT
        assert (hunk.lines[0].old_lineno, hunk.lines[0].new_lineno) == (1, 1)
        assert hunk.deletions[0].old_lineno == 2
        assert hunk.additions[0].new_lineno == 2

    def test_carriage_return_is_content(self) -> None:
        text = "--- a/f\n+++ b/f\n@@ -0,0 +1 @@\n+dos line\r\n"
        line = parse_diff(text).get_file("f").hunks[0].lines[0]
        assert line.content == "dos line\r"

    def test_quoted_paths(self) -> None:
        text = r'''diff --git "a/caf\303\251.txt" "b/caf\303\251.txt"
--- "a/caf\303\251.txt"
+++ "b/caf\303\251.txt"
@@ -0,0 +1 @@
+x
'''
        assert list(parse_diff(text).files) == ["café.txt"]

    def test_trailing_tab_stripped(self) -> None:
        text = "--- a/foo.txt\t2024-01-01 10:00\n+++ b/foo.txt\t2024-01-02 10:00\n@@ -1 +1 @@\n-a\n+b\n"
        assert list(parse_diff(text).files) == ["foo.txt"]

    def test_paths_with_spaces(self) -> None:
        text = """\
diff --git a/my file.txt b/my file.txt
--- a/my file.txt
+++ b/my file.txt
@@ -1 +1 @@
-a
+b
"""
        assert list(parse_diff(text).files) == ["my file.txt"]

    def test_new_file(self) -> None:
        text = """\
diff --git a/new.txt b/new.txt
new file mode 100644
index 0000000..ce01362
--- /dev/null
+++ b/new.txt
@@ -0,0 +1 @@
+hello
"""
        file_diff = parse_diff(text).get_file("new.txt")
        assert file_diff.old_path is None
        assert file_diff.is_new_file
        assert file_diff.headers[0] == "new file mode 100644"

    def test_deleted_file(self) -> None:
        text = "--- a/old.txt\n+++ /dev/null\n@@ -1 +0,0 @@\n-bye\n"
        file_diff = parse_diff(text).get_file("old.txt")
        assert file_diff.new_path is None
        assert file_diff.is_deleted
        assert file_diff.path == "old.txt"

    def test_binary_file_has_no_hunks(self) -> None:
        text = """\
diff --git a/img.png b/img.png
index 1111111..2222222 100644
Binary files a/img.png and b/img.png differ
"""
        file_diff = parse_diff(text).get_file("img.png")
        assert file_diff.is_binary
        assert file_diff.hunks == []

    def test_mode_only_change_then_next_file(self) -> None:
        text = """\
diff --git a/run.sh b/run.sh
old mode 100644
new mode 100755
""" + SINGLE_ADDITION
        diff = parse_diff(text)

        assert list(diff.files) == ["run.sh", "flake.nix"]
        assert diff.get_file("run.sh").headers == ["old mode 100644", "new mode 100755"]
        assert diff.get_file("run.sh").hunks == []


class TestParseDiffErrors:
    """Malformed diffs raise DiffError subclasses."""

    def test_malformed_hunk_header(self) -> None:
        with pytest.raises(MalformedHunkHeaderError) as exc_info:
            parse_diff("--- a/f\n+++ b/f\n@@ -x +1 @@\n+a\n")
        assert exc_info.value.line_number == 3
        assert exc_info.value.message.startswith("line 3: ")

    def test_premature_end_of_hunk(self) -> None:
        with pytest.raises(HunkCountMismatchError):
            parse_diff("--- a/f\n+++ b/f\n@@ -1,2 +1 @@\n-a\n")

    def test_excess_hunk_content(self) -> None:
        with pytest.raises(HunkCountMismatchError):
            parse_diff("--- a/f\n+++ b/f\n@@ -1 +1 @@\n-a\n+b\n+c\n")

    def test_next_hunk_too_early(self) -> None:
        with pytest.raises(HunkCountMismatchError):
            parse_diff("--- a/f\n+++ b/f\n@@ -1 +1,2 @@\n-a\n+b\n@@ -5 +6 @@\n-c\n+d\n")

    def test_hunk_without_file_header(self) -> None:
        with pytest.raises(MissingFileHeaderError):
            parse_diff("@@ -1 +1 @@\n-a\n+b\n")

    def test_git_header_without_file_pair(self) -> None:
        with pytest.raises(MissingFileHeaderError):
            parse_diff("diff --git a/f b/f\n@@ -1 +1 @@\n-a\n+b\n")

    def test_stray_text(self) -> None:
        with pytest.raises(MissingFileHeaderError):
            parse_diff(SINGLE_ADDITION + "garbage\n")

    def test_marker_without_preceding_line(self) -> None:
        with pytest.raises(DiffError):
            parse_diff("--- a/f\n+++ b/f\n@@ -1 +1 @@\n\\ No newline at end of file\n-a\n+b\n")

    def test_overlapping_hunks(self) -> None:
        text = "--- a/f\n+++ b/f\n@@ -1,3 +1 @@\n-a\n-b\n-c\n+x\n@@ -2 +3 @@\n-b\n+y\n"
        with pytest.raises(OverlappingHunksError):
            parse_diff(text)

    def test_duplicate_file(self) -> None:
        with pytest.raises(DiffError):
            parse_diff(SINGLE_ADDITION + SINGLE_ADDITION)
