"""Tests for markdoc.renderers.svg and markdoc.renderers.styles."""

from __future__ import annotations

import pytest

from markdoc.errors import RenderError
from markdoc.renderers.styles import (
    ensure_inline_styles,
    parse_declarations,
    parse_stylesheet,
)
from markdoc.renderers.svg import RenderedArtifact, parse_svg

NS = "{http://www.w3.org/2000/svg}"
XMLNS = 'xmlns="http://www.w3.org/2000/svg"'


def _svg(body: str, attrs: str = "") -> RenderedArtifact:
    return parse_svg(f"<svg {XMLNS} {attrs}>{body}</svg>")


def _style(artifact: RenderedArtifact, tag: str, index: int = 0) -> dict[str, str]:
    el = artifact.root.findall(f".//{NS}{tag}")[index]
    return {k: str(v) for k, v in parse_declarations(el.get("style") or "").items()}


# -- parse_svg ---------------------------------------------------------------


class TestParseSvg:
    def test_attributes(self):
        artifact = parse_svg(
            f'<svg {XMLNS} width="100" height="50" viewBox="0 0 100 50">'
            '<circle cx="50" cy="25" r="20"/></svg>'
        )
        assert artifact.width == "100"
        assert artifact.height == "50"
        assert artifact.view_box == "0 0 100 50"
        assert artifact.root.find(f"{NS}circle") is not None

    def test_xml_declaration_and_doctype(self):
        artifact = parse_svg(
            '<?xml version="1.0" encoding="UTF-8" standalone="no"?>\n'
            '<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" '
            '"http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">\n'
            f'<svg {XMLNS} width="8pt"><g/></svg>'
        )
        assert artifact.width == "8pt"

    def test_bytes_input(self):
        assert parse_svg(f"<svg {XMLNS}/>".encode()).root is not None

    def test_malformed(self):
        with pytest.raises(RenderError, match="invalid SVG"):
            parse_svg("<svg><rect></svg>")

    def test_wrong_root(self):
        with pytest.raises(RenderError, match="<svg>"):
            parse_svg("<html><body/></html>")

    def test_to_string_round_trips(self):
        artifact = _svg('<rect width="1" height="1"/>')
        again = parse_svg(artifact.to_string())
        assert again.to_string() == artifact.to_string()

    def test_iter_elements_excludes_root(self):
        artifact = _svg("<g><rect/></g>")
        tags = [el.tag for el in artifact.iter_elements()]
        assert tags == [f"{NS}g", f"{NS}rect"]


# -- Stylesheet parsing ------------------------------------------------------


class TestParseStylesheet:
    def test_skips_comments_and_at_rules(self):
        css = """
        /* comment { fill: red } */
        @keyframes dash { to { stroke-dashoffset: 0; } }
        @media print { rect { fill: green; } }
        .node rect, circle { fill: #fff; stroke: #333 !important; }
        """
        rules = parse_stylesheet(css)
        assert len(rules) == 2
        assert rules[0].declarations["fill"].value == "#fff"
        assert rules[0].declarations["stroke"].important is True
        assert rules[0].order == rules[1].order

    def test_unsupported_selectors_are_dropped(self):
        rules = parse_stylesheet("rect:hover { fill: red } a + b { fill: red } :root { fill: red }")
        assert rules == []

    def test_style_attribute_selector_is_dropped(self):
        assert parse_stylesheet("[style] { fill: red } rect[STYLE=x] { fill: red }") == []

    def test_parse_declarations(self):
        decls = parse_declarations("fill: red; STROKE : blue ;; junk; font-size: 12px !important")
        assert decls["fill"].value == "red"
        assert decls["stroke"].value == "blue"
        assert decls["font-size"].important is True
        assert "junk" not in decls


# -- Cascade -----------------------------------------------------------------


class TestEnsureInlineStyles:
    def test_returns_same_artifact(self):
        artifact = _svg("<rect/>")
        assert ensure_inline_styles(artifact) is artifact

    def test_initial_values(self):
        artifact = ensure_inline_styles(_svg("<rect/>"))
        assert _style(artifact, "rect") == {
            "fill": "black",
            "stroke": "none",
            "stroke-width": "1",
        }

    def test_stylesheet_rule_applies(self):
        artifact = ensure_inline_styles(
            _svg('<style>.node rect { fill: #f9f; stroke: #333; stroke-width: 2px }</style>'
                 '<g class="node"><rect/></g><rect/>')
        )
        assert _style(artifact, "rect", 0)["fill"] == "#f9f"
        assert _style(artifact, "rect", 0)["stroke-width"] == "2px"
        assert _style(artifact, "rect", 1)["fill"] == "black"

    def test_presentation_attribute_loses_to_stylesheet(self):
        artifact = ensure_inline_styles(
            _svg('<style>rect { fill: blue }</style><rect fill="red" stroke="green"/>')
        )
        styles = _style(artifact, "rect")
        assert styles["fill"] == "blue"
        assert styles["stroke"] == "green"

    def test_inline_beats_stylesheet(self):
        artifact = ensure_inline_styles(
            _svg('<style>#a { fill: blue }</style><rect id="a" style="fill: red"/>')
        )
        assert _style(artifact, "rect")["fill"] == "red"

    def test_important_stylesheet_beats_inline(self):
        artifact = ensure_inline_styles(
            _svg('<style>rect { fill: blue !important }</style><rect style="fill: red"/>')
        )
        assert _style(artifact, "rect")["fill"] == "blue"

    def test_specificity_then_order(self):
        artifact = ensure_inline_styles(
            _svg(
                "<style>#x { fill: red } .c { fill: green } rect { fill: blue }"
                " .c { stroke: pink } .c { stroke: teal }</style>"
                '<rect id="x" class="c"/>'
            )
        )
        styles = _style(artifact, "rect")
        assert styles["fill"] == "red"
        assert styles["stroke"] == "teal"

    def test_child_combinator(self):
        artifact = ensure_inline_styles(
            _svg("<style>g > rect { fill: red }</style><g><rect/><a><rect/></a></g>")
        )
        assert _style(artifact, "rect", 0)["fill"] == "red"
        assert _style(artifact, "rect", 1)["fill"] == "black"

    def test_attribute_selector(self):
        artifact = ensure_inline_styles(
            _svg('<style>[data-kind="edge"] { stroke: red }</style>'
                 '<path data-kind="edge"/><path data-kind="node"/>')
        )
        assert _style(artifact, "path", 0)["stroke"] == "red"
        assert _style(artifact, "path", 1)["stroke"] == "none"

    def test_inherited_from_root(self):
        artifact = ensure_inline_styles(
            _svg("<g><text>hi</text></g>", attrs='style="font-family: arial; font-size: 12px"')
        )
        styles = _style(artifact, "text")
        assert styles["font-family"] == "arial"
        assert styles["font-size"] == "12px"

    def test_inherit_keyword(self):
        artifact = ensure_inline_styles(
            _svg('<g fill="orange"><rect style="fill: inherit"/></g>')
        )
        assert _style(artifact, "rect")["fill"] == "orange"

    def test_other_inline_properties_are_kept(self):
        artifact = ensure_inline_styles(_svg('<rect style="opacity: 0.5"/>'))
        assert _style(artifact, "rect")["opacity"] == "0.5"

    def test_style_element_untouched(self):
        artifact = ensure_inline_styles(_svg("<style>rect { fill: red }</style><rect/>"))
        assert artifact.root.find(f"{NS}style").get("style") is None

    def test_root_is_not_rewritten(self):
        artifact = ensure_inline_styles(_svg("<rect/>"))
        assert artifact.root.get("style") is None

    def test_idempotent(self):
        source = (
            "<style>#m .node rect { fill: #ECECFF; stroke: #9370DB; stroke-width: 1px }"
            " .label { font-family: 'trebuchet ms', verdana; font-size: 16px !important }"
            "</style>"
            '<g class="node"><rect style="fill: red" fill="blue"/>'
            '<text class="label" font-size="10">A</text></g>'
        )
        artifact = parse_svg(f'<svg {XMLNS} id="m">{source}</svg>')
        once = ensure_inline_styles(artifact).to_string()
        twice = ensure_inline_styles(parse_svg(once)).to_string()
        assert twice == once
        assert ensure_inline_styles(artifact).to_string() == once

    def test_style_attribute_selectors_are_ignored(self):
        source = (
            "<style>rect[style] { fill: red !important }"
            " [style='fill: blue'] { stroke: green }</style>"
            '<rect fill="blue"/><circle style="fill: blue"/>'
        )
        once = ensure_inline_styles(parse_svg(f"<svg {XMLNS}>{source}</svg>"))
        assert _style(once, "rect")["fill"] == "blue"
        assert _style(once, "circle")["stroke"] == "none"

        twice = ensure_inline_styles(parse_svg(once.to_string()))
        assert twice.to_string() == once.to_string()
