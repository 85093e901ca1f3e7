from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from owncloud_adapter.config.constants.http_status_code import OcsStatusCode

SHARE_TYPE_PUBLIC_LINK = 3
PERMISSION_READ = 1

# Fields of an existing share that the OCS API lets a client change.
SHARE_PARAMS: FrozenSet[str] = frozenset({
    "permissions",
    "password",
    "publicUpload",
    "expireDate",
})


def _form_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class ShareRequest:
    """A public link share to create for a server-relative path"""
    path: str
    share_type: int = SHARE_TYPE_PUBLIC_LINK
    permissions: int = PERMISSION_READ

    def to_form(self) -> Dict[str, str]:
        return {
            "path": self.path,
            "shareType": str(self.share_type),
            "permissions": str(self.permissions),
        }


def filter_share_params(params: Optional[Mapping[str, Any]]) -> List[Tuple[str, str]]:
    """
    Keep only the mutable share fields, in the caller's order.
    Unknown keys are dropped without error.
    """
    return [
        (key, _form_value(value))
        for key, value in (params or {}).items()
        if key in SHARE_PARAMS
    ]


@dataclass
class ShareResponse:
    """
    Parsed OCS reply.

    url, token and id are always strings; an empty string means the server did
    not send the node. Callers check for emptiness, not for presence.
    """
    url: str = ""
    token: str = ""
    id: str = ""
    status: str = ""
    status_code: Optional[int] = None
    message: str = ""
    http_status: Optional[int] = None
    elements: List[Dict[str, str]] = field(default_factory=list)
    document: Any = None

    @property
    def is_ok(self) -> bool:
        return self.status_code in (OcsStatusCode.OK_V1.value, OcsStatusCode.OK_V2.value)

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "token": self.token, "id": self.id}


@dataclass(frozen=True)
class RenameRequest:
    """A MOVE from a server-relative source to an absolute destination URL"""
    source: str
    destination: str
