"""Parse BPMN/XML text into plain nested dicts the search engine can walk.

Shape of the produced tree:

- keys are element tags as written in the file (``bpmn:process``,
  ``camunda:script``, ``process``), attributes are ``@_<name>``;
- an element without attributes or children becomes its stripped text;
- otherwise it becomes a dict, with any text under ``#text``;
- repeated sibling tags collapse into a list in document order.
"""

from typing import Any

from lxml import etree

from bpmn_finder.core.tree.tags import ATTRIBUTE_PREFIX, TEXT_KEY
from bpmn_finder.errors import TreeParseError
from bpmn_finder.models.match import TreeNode


def _make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        encoding="utf-8",
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _element_key(element: Any) -> str:
    local = etree.QName(element).localname
    return f"{element.prefix}:{local}" if element.prefix else local


def _attribute_key(name: str, nsmap: dict[str | None, str]) -> str:
    qname = etree.QName(name)
    if qname.namespace is None:
        return f"{ATTRIBUTE_PREFIX}{qname.localname}"
    prefix = next((p for p, uri in nsmap.items() if p and uri == qname.namespace), None)
    if prefix is None:
        return f"{ATTRIBUTE_PREFIX}{qname.localname}"
    return f"{ATTRIBUTE_PREFIX}{prefix}:{qname.localname}"


def _element_text(element: Any) -> str:
    parts = [element.text or ""]
    parts.extend(child.tail or "" for child in element)
    return "".join(parts).strip()


def _element_to_node(element: Any) -> TreeNode | str:
    node: TreeNode = {}
    for name, value in element.attrib.items():
        node[_attribute_key(name, element.nsmap)] = value

    for child in element:
        if not isinstance(child.tag, str):
            continue
        key = _element_key(child)
        value = _element_to_node(child)
        if key not in node:
            node[key] = value
        elif isinstance(node[key], list):
            node[key].append(value)
        else:
            node[key] = [node[key], value]

    text = _element_text(element)
    if not node:
        return text
    if text:
        node[TEXT_KEY] = text
    return node


def parse_tree(content: str) -> TreeNode:
    """Parse XML text into a tree rooted at the document element.

    Raises:
        TreeParseError: If the content is not well-formed XML.
    """
    try:
        root = etree.fromstring(content.encode("utf-8"), _make_parser())
    except etree.XMLSyntaxError as exc:
        raise TreeParseError(str(exc)) from exc
    if root is None:
        msg = "Document has no root element"
        raise TreeParseError(msg)
    return {_element_key(root): _element_to_node(root)}
