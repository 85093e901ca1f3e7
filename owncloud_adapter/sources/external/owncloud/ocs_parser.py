"""
Decoding of OCS XML replies.

OCS wraps every reply in an <ocs> document (some servers use another root):

    <ocs>
      <meta><status>ok</status><statuscode>100</statuscode><message/></meta>
      <data>
        <id>42</id><url>https://cloud.example/s/abc123</url><token>abc123</token>
      </data>
    </ocs>

Listings put one <element> per share under <data> instead.
"""

from typing import Dict, List, Optional, Union

from lxml import etree  # type: ignore

from owncloud_adapter.models.shares import ShareResponse
from owncloud_adapter.utils.xml_utils import child_text, local_name, parse_xml_document


def _find_child(parent: Optional[etree._Element], tag: str) -> Optional[etree._Element]:
    if parent is None:
        return None
    for child in parent:
        if local_name(child) == tag:
            return child
    return None


def _parse_status_code(text: str) -> Optional[int]:
    try:
        return int(text)
    except (TypeError, ValueError):
        return None


def _parse_elements(data: Optional[etree._Element]) -> List[Dict[str, str]]:
    elements = []
    if data is None:
        return elements
    for element in data:
        if local_name(element) != "element":
            continue
        elements.append({
            local_name(child): child.text or ""
            for child in element
            if local_name(child)
        })
    return elements


def parse_ocs_response(body: Union[bytes, str, None], http_status: Optional[int] = None) -> ShareResponse:
    """
    Decode an OCS reply into a ShareResponse.
    Args:
        body: Raw reply body, possibly empty
        http_status: HTTP status of the reply, recorded as-is
    Returns:
        ShareResponse whose url/token/id are '' when the server did not send them
    Raises:
        ResponseParseError: the body is present but not well-formed XML
    """
    root = parse_xml_document(body)

    meta = _find_child(root, "meta")
    data = _find_child(root, "data")

    return ShareResponse(
        url=child_text(data, "url"),
        token=child_text(data, "token"),
        id=child_text(data, "id"),
        status=child_text(meta, "status"),
        status_code=_parse_status_code(child_text(meta, "statuscode")),
        message=child_text(meta, "message"),
        http_status=http_status,
        elements=_parse_elements(data),
        document=root,
    )
