from typing import Any, Dict

import httpx  # type: ignore


class HTTPResponse:
    """Thin wrapper around httpx.Response
    Args:
        response: The raw httpx response
    """

    def __init__(self, response: httpx.Response) -> None:
        self.response = response

    @property
    def status(self) -> int:
        return self.response.status_code

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self.response.headers)

    @property
    def url(self) -> str:
        return str(self.response.url)

    @property
    def is_success(self) -> bool:
        return self.response.is_success

    def bytes(self) -> bytes:
        return self.response.content

    def text(self) -> str:
        return self.response.text

    def json(self) -> Any:
        return self.response.json()

    def __repr__(self) -> str:
        return f"HTTPResponse(status={self.status}, url={self.url!r})"
