import logging
from typing import Optional, Union

from lxml import etree  # type: ignore

from owncloud_adapter.exceptions.owncloud_exceptions import ResponseParseError

logger = logging.getLogger(__name__)

# Some OCS calls (DELETE in particular) legitimately come back without a body
EMPTY_DOCUMENT = b"<root/>"


def secure_xml_parser() -> etree.XMLParser:
    """
    Parser for untrusted server XML: no entity expansion, no DTD loading and
    no network access.
    """
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        dtd_validation=False,
        huge_tree=False,
        remove_blank_text=True,
    )


def to_xml_bytes(body: Union[bytes, str, None]) -> bytes:
    """lxml refuses str input that carries an encoding declaration, so always hand it bytes."""
    if body is None:
        return b""
    if isinstance(body, str):
        return body.encode("utf-8")
    return body


def parse_xml_document(body: Union[bytes, str, None]) -> etree._Element:
    """
    Parse an untrusted reply body into an lxml root element.
    Args:
        body: Raw reply body; empty bodies become an empty <root/> document
    Raises:
        ResponseParseError: the body is present but not well-formed XML
    """
    raw = to_xml_bytes(body)
    if not raw.strip():
        raw = EMPTY_DOCUMENT

    try:
        return etree.fromstring(raw, parser=secure_xml_parser())
    except etree.XMLSyntaxError as e:
        preview = raw[:200].decode("utf-8", errors="replace")
        logger.error(f"Failed to parse XML response: {e}. Response preview: {preview}...")
        raise ResponseParseError(
            f"Unable to parse response body into XML: {e}",
            diagnostic=str(e),
        ) from e


def local_name(element: etree._Element) -> str:
    """Tag without its namespace; comments and processing instructions yield ''."""
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element).localname


def child_text(parent: Optional[etree._Element], tag: str) -> str:
    """Text of a direct child, or '' when the child is absent or empty."""
    if parent is None:
        return ""
    for child in parent:
        if local_name(child) == tag:
            return child.text or ""
    return ""
