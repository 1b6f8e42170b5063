"""SVG document tree wrapper and parsing helper."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Iterator

from markdoc.errors import RenderError

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)


def local_name(tag: object) -> str:
    """Strip the ``{namespace}`` prefix from an ElementTree tag."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


class RenderedArtifact:
    """A rendered diagram as an SVG element tree."""

    def __init__(self, root: ET.Element) -> None:
        if local_name(root.tag) != "svg":
            raise RenderError(f"Expected <svg> root element, got <{local_name(root.tag)}>")
        self.root = root

    @property
    def width(self) -> str | None:
        return self.root.get("width")

    @property
    def height(self) -> str | None:
        return self.root.get("height")

    @property
    def view_box(self) -> str | None:
        return self.root.get("viewBox")

    def iter_elements(self) -> Iterator[ET.Element]:
        """Yield every element below (not including) the root."""
        it = self.root.iter()
        next(it)
        yield from it

    def to_string(self) -> str:
        return ET.tostring(self.root, encoding="unicode")

    def __repr__(self) -> str:
        return f"RenderedArtifact(width={self.width!r}, height={self.height!r})"


def parse_svg(svg: str | bytes) -> RenderedArtifact:
    """Parse serialized SVG into a RenderedArtifact.

    Raises RenderError if the text is not well-formed XML or the root is
    not an ``<svg>`` element.
    """
    data = svg.encode("utf-8") if isinstance(svg, str) else svg
    try:
        root = ET.fromstring(data)
    except ET.ParseError as e:
        raise RenderError(f"Backend returned invalid SVG: {e}") from e
    return RenderedArtifact(root)
