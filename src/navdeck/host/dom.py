"""Small DOM helpers over BeautifulSoup tags.

BeautifulSoup parses ``class`` as a list (``html.parser`` treats it as
a multi-valued attribute), but values assigned by hand may be plain
strings. These helpers accept both.
"""

from bs4 import BeautifulSoup, Tag


def classes(tag: Tag) -> list[str]:
    """Return the tag's class list (empty when it has none)."""
    value = tag.get("class")
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    return list(value)


def has_class(tag: Tag, name: str) -> bool:
    return name in classes(tag)


def add_class(tag: Tag, name: str) -> None:
    current = classes(tag)
    if name not in current:
        current.append(name)
    tag["class"] = current


def remove_class(tag: Tag, name: str) -> None:
    current = [c for c in classes(tag) if c != name]
    if current:
        tag["class"] = current
    elif "class" in tag.attrs:
        del tag["class"]


def toggle_class(tag: Tag, name: str, on: bool) -> None:
    if on:
        add_class(tag, name)
    else:
        remove_class(tag, name)


def closest(tag: Tag, name: str) -> Tag | None:
    """Return *tag* itself or its nearest ancestor named *name*."""
    if tag.name == name:
        return tag
    return tag.find_parent(name)


def _parse_style(value: str) -> dict[str, str]:
    declarations: dict[str, str] = {}
    for part in value.split(";"):
        prop, sep, val = part.partition(":")
        if sep and prop.strip():
            declarations[prop.strip().lower()] = val.strip()
    return declarations


def get_style(tag: Tag, prop: str) -> str | None:
    """Return one inline style declaration, or None."""
    return _parse_style(str(tag.get("style", ""))).get(prop.lower())


def set_style(tag: Tag, prop: str, value: str) -> None:
    """Set one inline style declaration, keeping the others."""
    declarations = _parse_style(str(tag.get("style", "")))
    declarations[prop.lower()] = value
    tag["style"] = "; ".join(f"{k}: {v}" for k, v in declarations.items())


def is_displayed(tag: Tag) -> bool:
    """False when the tag or an ancestor has ``display: none`` inline."""
    node: Tag | None = tag
    while node is not None and isinstance(node, Tag):
        if get_style(node, "display") == "none":
            return False
        node = node.parent
    return True


def get_title(document: BeautifulSoup) -> str:
    if document.title is None or document.title.string is None:
        return ""
    return str(document.title.string)


def set_title(document: BeautifulSoup, text: str) -> None:
    """Set ``<title>``, creating it (inside ``<head>`` when present) if missing."""
    if document.title is None:
        title = document.new_tag("title")
        parent = document.head or document
        parent.append(title)
    document.title.string = text
