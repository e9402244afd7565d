"""Parsing of the per-user ``pages`` string into navigation data.

A pages string is a comma separated list of entries::

    Dashboard,Jurnal>Jurnal=jurnal|Pengaturan Jurnal=jurnal/pengaturan

``Label=page`` gives a display label to a page id, ``Group>child|child``
builds a one-level menu group. Legacy rows may carry emoji prefixes or
checkbox glyphs used as separators; those are cleaned up through a
``GlyphTable`` before tokenizing.
"""

from dataclasses import dataclass

from .schemas import MenuNode, ParsedPages


ENTRY_SEPARATOR = ","
GROUP_MARKER = ">"
CHILD_SEPARATOR = "|"
LABEL_MARKER = "="


@dataclass(frozen=True)
class GlyphTable:
    strip: frozenset[str]
    separators: frozenset[str]

    def clean(self, text: str) -> str:
        table = {ord(ch): None for ch in self.strip}
        table.update({ord(ch): ENTRY_SEPARATOR for ch in self.separators})
        return text.translate(table)


DEFAULT_GLYPHS = GlyphTable(
    strip=frozenset(
        "\U0001F4CA\U0001F4CB\U0001F527\u2193\U0001F4E3\U0001F393\U0001F465\u2297"
        "\U0001F3AF\U0001F4C8\U0001F4C9\u2713\u2714\u274C\u26A0\U0001F4CC\U0001F4CD"
        "\U0001F514\U0001F515\uFE0F"
    ),
    # ballot box, ballot box with check, ballot box with x
    separators=frozenset("\u2610\u2611\u2612"),
)


def _split_label(token: str) -> tuple[str, str] | None:
    if LABEL_MARKER not in token:
        return token, token
    title, page_id = token.split(LABEL_MARKER, 1)
    title, page_id = title.strip(), page_id.strip()
    if not title or not page_id:
        return None
    return title, page_id


def _parse_group(token: str, flat: list[str]) -> MenuNode | None:
    label, blob = token.split(GROUP_MARKER, 1)
    label = label.strip()
    if not label:
        return None

    children = []
    for raw_child in blob.split(CHILD_SEPARATOR):
        child = raw_child.strip()
        if not child:
            continue
        pair = _split_label(child)
        if pair is None:
            continue
        title, page_id = pair
        children.append(MenuNode(title=title, page_id=page_id))
        flat.append(page_id)

    return MenuNode(title=label, page_id=label, children=children)


def parse_pages(pages: str | None, glyphs: GlyphTable = DEFAULT_GLYPHS) -> ParsedPages:
    """Parse a pages string into ``flat_identifiers`` and a menu ``tree``.

    Malformed entries are dropped; this never raises.
    """
    if not pages:
        return ParsedPages()

    cleaned = glyphs.clean(pages)
    tokens = [t.strip() for t in cleaned.split(ENTRY_SEPARATOR)]

    tree: list[MenuNode] = []
    flat: list[str] = []
    for token in tokens:
        if not token:
            continue

        if GROUP_MARKER in token:
            node = _parse_group(token, flat)
            if node is not None:
                tree.append(node)
            continue

        pair = _split_label(token)
        if pair is None:
            continue
        title, page_id = pair
        tree.append(MenuNode(title=title, page_id=page_id))
        flat.append(page_id)

    return ParsedPages(flat_identifiers=list(dict.fromkeys(flat)), tree=tree)
