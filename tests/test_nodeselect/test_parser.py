"""Unit tests for nodeselect.parser."""

import textwrap
from pathlib import Path

from nodeselect.parser import parse_file, parse_frontmatter, parse_links, parse_tags, parse_typed_links


# ---------------------------------------------------------------------------
# parse_frontmatter
# ---------------------------------------------------------------------------


class TestParseFrontmatter:
    def test_basic(self):
        content = "---\nid: abc\ntitle: Hello\n---\nBody text\n"
        meta, body = parse_frontmatter(content)
        assert meta == {"id": "abc", "title": "Hello"}
        assert body == "Body text\n"

    def test_no_frontmatter(self):
        meta, body = parse_frontmatter("Just body")
        assert meta == {}
        assert body == "Just body"

    def test_invalid_yaml_returns_empty(self, capsys):
        meta, _ = parse_frontmatter("---\n: bad: [yaml\n---\nBody\n")
        assert meta == {}
        assert "[warn]" in capsys.readouterr().err

    def test_non_mapping_returns_empty(self):
        meta, _ = parse_frontmatter("---\n- a\n- b\n---\nBody\n")
        assert meta == {}


# ---------------------------------------------------------------------------
# parse_links / parse_typed_links
# ---------------------------------------------------------------------------


class TestParseLinks:
    def test_bracket_link_with_description(self):
        assert parse_links("see [[id:abc][Alpha]]") == [("id", "abc", 1)]

    def test_bracket_link_without_description(self):
        assert parse_links("[[id:abc]]") == [("id", "abc", 1)]

    def test_markdown_link(self):
        assert parse_links("a [Alpha](id:abc) b") == [("id", "abc", 1)]

    def test_web_link_type(self):
        assert parse_links("[[https://example.com][web]]") == [("https", "//example.com", 1)]

    def test_line_numbers_and_order(self):
        text = "[[id:a]] then [[file:x.md]]\n\n[b](id:b)\n"
        assert parse_links(text) == [("id", "a", 1), ("file", "x.md", 1), ("id", "b", 3)]

    def test_links_in_code_fence_ignored(self):
        text = "```\n[[id:hidden]]\n```\n[[id:shown]]\n"
        assert parse_links(text) == [("id", "shown", 4)]

    def test_image_is_not_a_link(self):
        assert parse_links("![alt](file:pic.png)") == []

    def test_plain_wikilink_is_untyped(self):
        assert parse_links("[[Just a title]]") == []


class TestParseTypedLinks:
    def test_only_requested_type(self):
        text = "[[id:p][P]] [[https://example.com]] [[id:q]]"
        assert parse_typed_links(text, "id") == ["p", "q"]

    def test_deduplicated_in_order(self):
        text = "[[id:q]] [[id:p]] [p](id:p) [[id:q]]"
        assert parse_typed_links(text, "id") == ["q", "p"]

    def test_other_type(self):
        text = "[[id:p]] [[https://example.com]]"
        assert parse_typed_links(text, "https") == ["//example.com"]

    def test_none_found(self):
        assert parse_typed_links("no links here", "id") == []


# ---------------------------------------------------------------------------
# parse_tags
# ---------------------------------------------------------------------------


class TestParseTags:
    def test_inline_tags(self):
        assert parse_tags("Hello #python and #data-science") == ["python", "data-science"]

    def test_heading_is_not_a_tag(self):
        assert parse_tags("# Heading\nbody #real") == ["real"]

    def test_deduplicated(self):
        assert parse_tags("#a #b #a") == ["a", "b"]


# ---------------------------------------------------------------------------
# parse_file
# ---------------------------------------------------------------------------


def _write(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "note.md"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


class TestParseFile:
    def test_file_node(self, tmp_path: Path):
        path = _write(tmp_path, """\
            ---
            id: n1
            title: Note One
            tags: [a, b]
            aliases: [N1]
            refs: ["@key"]
            ---
            Body #c
        """)
        parsed = parse_file(path)
        [node] = parsed.nodes
        assert node.id == "n1"
        assert node.title == "Note One"
        assert node.point == 1
        assert node.level == 0
        assert node.tags == ["a", "b", "c"]
        assert node.aliases == ["N1"]
        assert node.refs == ["@key"]

    def test_title_falls_back_to_stem(self, tmp_path: Path):
        path = _write(tmp_path, "---\nid: n1\n---\nBody\n")
        assert parse_file(path).nodes[0].title == "note"

    def test_no_id_means_no_node(self, tmp_path: Path):
        path = _write(tmp_path, "---\ntitle: T\n---\n[[id:x]]\n")
        parsed = parse_file(path)
        assert parsed.nodes == []
        assert parsed.links == []

    def test_heading_node(self, tmp_path: Path):
        path = _write(tmp_path, """\
            ---
            id: top
            ---
            intro

            ## Section {#sec}
            text
        """)
        parsed = parse_file(path)
        sec = next(n for n in parsed.nodes if n.id == "sec")
        assert sec.title == "Section"
        assert sec.level == 2
        assert sec.point == 6

    def test_heading_node_without_file_node(self, tmp_path: Path):
        path = _write(tmp_path, "# Only {#only}\n[[id:x]]\n")
        parsed = parse_file(path)
        assert [n.id for n in parsed.nodes] == ["only"]
        assert [(l.source, l.dest) for l in parsed.links] == [("only", "x")]

    def test_link_source_is_innermost_node(self, tmp_path: Path):
        path = _write(tmp_path, """\
            ---
            id: top
            ---
            [[id:a]]
            ## Sec {#sec}
            [[id:b]]
            ### Sub
            [[id:c]]
            ## Other
            [[id:d]]
        """)
        parsed = parse_file(path)
        sources = {l.dest: l.source for l in parsed.links}
        assert sources == {"a": "top", "b": "sec", "c": "sec", "d": "top"}

    def test_link_positions(self, tmp_path: Path):
        path = _write(tmp_path, "---\nid: top\n---\n\n[[id:a]]\n")
        [link] = parse_file(path).links
        assert link.pos == 5

    def test_scope_ends(self, tmp_path: Path):
        path = _write(tmp_path, "---\nid: top\n---\n## S {#s}\nx\n## T\ny\n")
        parsed = parse_file(path)
        assert parsed.ends["s"] == 5
        assert parsed.ends["top"] == 8

    def test_links_on_heading_lines(self, tmp_path: Path):
        path = _write(tmp_path, """\
            ---
            id: top
            ---
            # See [[id:a][A]]
            ## Part [[id:b]] {#part}
            ### Aside [b](id:c)
        """)
        parsed = parse_file(path)
        sources = {l.dest: (l.source, l.pos) for l in parsed.links}
        assert sources == {"a": ("top", 4), "b": ("part", 5), "c": ("part", 6)}
