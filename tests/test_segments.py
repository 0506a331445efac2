# tests/test_segments.py

from regionalise.codeaware import SegmentKind, segment
from regionalise.comments import find_comments
from regionalise.ignore import scan_ignores
from regionalise.markdown import convert_markdown
from regionalise.models import IgnoreKind


def test_comment_syntaxes():
    text = "x = 1 // line\n/* block */\n# hash\n-- sql\n<!-- html -->\n; lisp\n% tex\nREM batch"
    syntaxes = [c.syntax for c in find_comments(text)]
    assert syntaxes == ["c_line", "c_block", "hash", "sql", "html", "lisp", "tex", "batch"]


def test_urls_are_not_line_comments():
    assert find_comments("see http://example.com for more") == []


def test_ignore_next_and_standalone_markers():
    scan = scan_ignores("// m2e-ignore\nThis has color.\nThis has color too.")
    assert scan.skipped_lines == frozenset({1})
    assert not scan.file_ignored

    scan = scan_ignores("# m2e-ignore-next\na\nb")
    assert scan.directives[0].kind == IgnoreKind.NEXT
    assert scan.skipped_lines == frozenset({1})


def test_trailing_marker_ignores_its_own_line():
    scan = scan_ignores("first\ncolor = 1  # m2e-ignore\nlast")
    assert scan.skipped_lines == frozenset({1})

    scan = scan_ignores("// M2E-IGNORE-LINE\nnext")
    assert scan.skipped_lines == frozenset({0})


def test_file_marker():
    assert scan_ignores("<!-- m2e-ignore-file -->\ncolor").file_ignored


def test_markers_outside_comments_do_not_count():
    scan = scan_ignores("The word m2e-ignore appears in prose\ncolor")
    assert scan.directives == ()


def test_plain_text_is_one_segment():
    segments = segment("No code here.")
    assert [(s.kind, s.start, s.end) for s in segments] == [(SegmentKind.TEXT, 0, 13)]


def test_fence_inline_and_comments():
    text = "Use `color` here.\n```go\n// pick a color\nfunc color() {}\n```\nDone."
    segments = segment(text)
    assert "".join(text[s.start:s.end] for s in segments) == text

    kinds = [(s.kind, text[s.start:s.end]) for s in segments]
    assert (SegmentKind.CODE, "`color`") in kinds
    assert (SegmentKind.COMMENT, "// pick a color") in kinds
    assert all(s.language == "go" for s in segments if s.kind == SegmentKind.COMMENT)


def test_markdown_inner_text_converted_and_wrapped():
    def shout(text):
        return text.replace("color", "colour")

    text = "A **color** and *color* with [color](http://x.com/color) and __color__."
    assert convert_markdown(text, shout) == (
        "A **colour** and *colour* with [colour](http://x.com/color) and __colour__."
    )


def test_markdown_free_text_passes_straight_through():
    seen = []
    convert_markdown("plain color", lambda t: seen.append(t) or t)
    assert seen == ["plain color"]


def test_tilde_fences():
    text = "~~~python\n# color\nx = 1\n~~~\nMore color."
    kinds = [(s.kind, text[s.start:s.end], s.language) for s in segment(text)]
    assert (SegmentKind.COMMENT, "# color", "python") in kinds
    assert (SegmentKind.TEXT, "\nMore color.", None) in kinds


def test_unfenced_source_only_sniffed_on_request():
    text = "#!/usr/bin/env python\n# pick a color\nprint('color')\n"
    assert [s.kind for s in segment(text)] == [SegmentKind.TEXT]

    kinds = [(s.kind, text[s.start:s.end]) for s in segment(text, detect_raw_code=True)]
    assert (SegmentKind.COMMENT, "# pick a color") in kinds
    assert (SegmentKind.CODE, "\nprint('color')\n") in kinds
    assert SegmentKind.TEXT not in {k for k, _ in kinds}


def test_prose_is_not_sniffed_as_code():
    text = "The room is 12 feet wide"
    assert [s.kind for s in segment(text, detect_raw_code=True)] == [SegmentKind.TEXT]


def test_ignore_stats_count_each_kind():
    scan = scan_ignores("// m2e-ignore\na\nb  # m2e-ignore\n# m2e-ignore-next\nc\n")
    assert scan.stats() == {"next": 2, "line": 1}
    assert scan_ignores("no markers").stats() == {}


def test_placeholder_shaped_text_survives_markdown():
    def shout(text):
        return text.replace("color", "colour")

    assert convert_markdown("**XMDFMTX0XMDFMTX** color", shout) == "**XMDFMTX0XMDFMTX** colour"
    assert convert_markdown("\ue0000\ue000 and **color**", shout) == "\ue0000\ue000 and **colour**"
    assert convert_markdown("\ue0009\ue000 *color*", shout) == "\ue0009\ue000 *colour*"


def test_nested_markdown_is_restored():
    def shout(text):
        return text.replace("color", "colour")

    text = "**[color](http://x.com/color)** color"
    assert convert_markdown(text, shout) == "**[colour](http://x.com/color)** colour"
