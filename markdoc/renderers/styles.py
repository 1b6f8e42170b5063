"""Resolve cascaded SVG styles into literal inline declarations.

Downstream exporters (rasterizers, PDF writers, HTML embedding without the
original stylesheet) only see what is written on each element. This module
computes the effective value of a fixed set of visual properties for every
element and writes it into the element's ``style`` attribute.

Precedence follows CSS: inline ``!important`` > stylesheet ``!important`` >
inline > stylesheet (specificity, then source order) > presentation
attribute > inherited value > initial value. Only simple selectors are
supported (type, ``*``, ``.class``, ``#id``, ``[attr]``, ``[attr=value]``
with descendant and child combinators); rules using anything else are
ignored, as are attribute selectors on ``style`` itself. ``@media``/``@keyframes`` and other block at-rules are skipped.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from markdoc.renderers.svg import RenderedArtifact, local_name

INLINE_PROPERTIES: tuple[str, ...] = (
    "fill",
    "stroke",
    "stroke-width",
    "font-family",
    "font-size",
)

INITIAL_VALUES: dict[str, str] = {
    "fill": "black",
    "stroke": "none",
    "stroke-width": "1",
}

_NON_RENDERING = frozenset({"style", "script", "title", "desc", "metadata"})

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_COMPOUND_RE = re.compile(r"^(\*|[A-Za-z][\w-]*)?(.*)$", re.S)
_SIMPLE_RE = re.compile(
    r"""
    (?P<kind>[.#])(?P<name>[\w-]+)
    | \[\s*(?P<attr>[\w:-]+)\s*(?:=\s*(?P<value>"[^"]*"|'[^']*'|[^\]\s]+)\s*)?\]
    """,
    re.X,
)

# (important, origin, specificity, order); origin: 2 inline, 1 sheet, 0 attribute
_Priority = tuple[bool, int, tuple[int, int, int], int]


@dataclass(frozen=True)
class _Compound:
    tag: str | None = None
    ids: tuple[str, ...] = ()
    classes: tuple[str, ...] = ()
    attrs: tuple[tuple[str, str | None], ...] = ()

    def matches(self, el: ET.Element) -> bool:
        if self.tag is not None and self.tag != local_name(el.tag):
            return False
        if self.ids and any(el.get("id") != i for i in self.ids):
            return False
        if self.classes:
            present = set((el.get("class") or "").split())
            if not present.issuperset(self.classes):
                return False
        for name, value in self.attrs:
            actual = el.get(name)
            if actual is None or (value is not None and actual != value):
                return False
        return True


@dataclass(frozen=True)
class _Selector:
    compounds: tuple[_Compound, ...]
    combinators: tuple[str, ...]  # between compounds[i] and compounds[i+1]
    specificity: tuple[int, int, int]


@dataclass(frozen=True)
class Declaration:
    value: str
    important: bool = False

    def __str__(self) -> str:
        return f"{self.value} !important" if self.important else self.value


@dataclass
class StyleRule:
    selector: _Selector
    order: int
    declarations: dict[str, Declaration] = field(default_factory=dict)


# ----------------------------------------------------------------------
# Parsing
# ----------------------------------------------------------------------


def parse_declarations(text: str) -> dict[str, Declaration]:
    """Parse ``prop: value; ...`` into an ordered mapping (last one wins)."""
    result: dict[str, Declaration] = {}
    for chunk in text.split(";"):
        if ":" not in chunk:
            continue
        prop, value = chunk.split(":", 1)
        prop = prop.strip().lower()
        value = value.strip()
        if not prop or not value:
            continue
        important = False
        lowered = value.lower()
        if lowered.endswith("!important"):
            important = True
            value = value[: -len("!important")].rstrip()
        result[prop] = Declaration(value, important)
    return result


def _parse_compound(text: str) -> _Compound | None:
    m = _COMPOUND_RE.match(text)
    if m is None:
        return None
    tag = m.group(1)
    rest = m.group(2)
    ids: list[str] = []
    classes: list[str] = []
    attrs: list[tuple[str, str | None]] = []
    pos = 0
    while pos < len(rest):
        sm = _SIMPLE_RE.match(rest, pos)
        if sm is None:
            # pseudo-classes, sibling combinators and friends
            return None
        if sm.group("kind") == "#":
            ids.append(sm.group("name"))
        elif sm.group("kind") == ".":
            classes.append(sm.group("name"))
        else:
            if sm.group("attr").lower() == "style":
                # normalization writes this attribute, so matching on it is unstable
                return None
            value = sm.group("value")
            if value is not None and value[:1] in "\"'":
                value = value[1:-1]
            attrs.append((sm.group("attr"), value))
        pos = sm.end()
    return _Compound(
        tag=None if tag in (None, "*") else tag,
        ids=tuple(ids),
        classes=tuple(classes),
        attrs=tuple(attrs),
    )


def _parse_selector(text: str) -> _Selector | None:
    tokens = re.sub(r"\s*>\s*", " > ", text.strip()).split()
    if not tokens:
        return None
    compounds: list[_Compound] = []
    combinators: list[str] = []
    pending = " "
    for token in tokens:
        if token == ">":
            if not compounds or pending == ">":
                return None
            pending = ">"
            continue
        compound = _parse_compound(token)
        if compound is None:
            return None
        if compounds:
            combinators.append(pending)
        compounds.append(compound)
        pending = " "
    if pending == ">":
        return None
    specificity = (
        sum(len(c.ids) for c in compounds),
        sum(len(c.classes) + len(c.attrs) for c in compounds),
        sum(1 for c in compounds if c.tag is not None),
    )
    return _Selector(tuple(compounds), tuple(combinators), specificity)


def _matching_brace(css: str, open_pos: int) -> int:
    depth = 0
    for i in range(open_pos, len(css)):
        if css[i] == "{":
            depth += 1
        elif css[i] == "}":
            depth -= 1
            if depth == 0:
                return i
    return len(css)


def parse_stylesheet(css: str, start_order: int = 0) -> list[StyleRule]:
    """Parse a CSS stylesheet into rules with source-order numbers."""
    css = _COMMENT_RE.sub("", css)
    rules: list[StyleRule] = []
    order = start_order
    pos = 0
    while True:
        brace = css.find("{", pos)
        if brace == -1:
            break
        close = _matching_brace(css, brace)
        prelude = css[pos:brace].rsplit(";", 1)[-1].strip()
        body = css[brace + 1 : close]
        pos = close + 1
        if not prelude or prelude.startswith("@"):
            continue
        declarations = parse_declarations(body)
        for part in prelude.split(","):
            selector = _parse_selector(part)
            if selector is not None:
                rules.append(StyleRule(selector, order, declarations))
        order += 1
    return rules


# ----------------------------------------------------------------------
# Cascade
# ----------------------------------------------------------------------


class _Cascade:
    def __init__(self, root: ET.Element) -> None:
        self.root = root
        self.parents: dict[ET.Element, ET.Element] = {
            child: parent for parent in root.iter() for child in parent
        }
        self.rules: list[StyleRule] = []
        for el in root.iter():
            if local_name(el.tag) == "style" and el.get("type", "text/css") == "text/css":
                self.rules.extend(
                    parse_stylesheet(el.text or "", start_order=len(self.rules))
                )
        self.computed: dict[ET.Element, dict[str, str | None]] = {}

    def _matches(self, el: ET.Element, selector: _Selector, idx: int) -> bool:
        if not selector.compounds[idx].matches(el):
            return False
        if idx == 0:
            return True
        parent = self.parents.get(el)
        if selector.combinators[idx - 1] == ">":
            return parent is not None and self._matches(parent, selector, idx - 1)
        while parent is not None:
            if self._matches(parent, selector, idx - 1):
                return True
            parent = self.parents.get(parent)
        return False

    def _cascaded(self, el: ET.Element) -> dict[str, str]:
        best: dict[str, tuple[_Priority, str]] = {}

        def offer(prop: str, priority: _Priority, value: str) -> None:
            current = best.get(prop)
            if current is None or priority >= current[0]:
                best[prop] = (priority, value)

        for prop in INLINE_PROPERTIES:
            attr = el.get(prop)
            if attr is not None and attr.strip():
                offer(prop, (False, 0, (0, 0, 0), 0), attr.strip())

        for rule in self.rules:
            if not self._matches(el, rule.selector, len(rule.selector.compounds) - 1):
                continue
            for prop in INLINE_PROPERTIES:
                decl = rule.declarations.get(prop)
                if decl is not None:
                    offer(
                        prop,
                        (decl.important, 1, rule.selector.specificity, rule.order),
                        decl.value,
                    )

        inline = parse_declarations(el.get("style") or "")
        for prop in INLINE_PROPERTIES:
            decl = inline.get(prop)
            if decl is not None:
                offer(prop, (decl.important, 2, (0, 0, 0), 0), decl.value)

        return {prop: value for prop, (_, value) in best.items()}

    def resolve(self, el: ET.Element, inherited: dict[str, str | None]) -> None:
        cascaded = self._cascaded(el)
        values: dict[str, str | None] = {}
        for prop in INLINE_PROPERTIES:
            value = cascaded.get(prop)
            keyword = value.lower() if value is not None else None
            if keyword is None or keyword in ("inherit", "unset"):
                values[prop] = inherited.get(prop)
            elif keyword == "initial":
                values[prop] = INITIAL_VALUES.get(prop)
            else:
                values[prop] = value
        self.computed[el] = values
        for child in el:
            self.resolve(child, values)


def _write_inline(el: ET.Element, values: dict[str, str | None]) -> None:
    declarations = parse_declarations(el.get("style") or "")
    for prop in INLINE_PROPERTIES:
        value = values.get(prop)
        if value is None:
            continue
        existing = declarations.get(prop)
        important = existing.important if existing is not None else False
        declarations[prop] = Declaration(value, important)
    if declarations:
        el.set("style", "; ".join(f"{k}: {d}" for k, d in declarations.items()))


def ensure_inline_styles(artifact: RenderedArtifact) -> RenderedArtifact:
    """Write effective style values onto every element of *artifact*.

    Mutates and returns the same artifact. Applying it again to its own
    output produces identical markup.
    """
    cascade = _Cascade(artifact.root)
    cascade.resolve(artifact.root, dict(INITIAL_VALUES))
    for el in artifact.iter_elements():
        if local_name(el.tag) in _NON_RENDERING:
            continue
        _write_inline(el, cascade.computed[el])
    return artifact
