from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union


class IFilesystemAdapter(ABC):
    """Base interface for filesystem-style adapters. Failures surface as False/None."""

    @abstractmethod
    async def write(self, path: str, contents: Union[bytes, str]) -> bool:
        pass

    @abstractmethod
    async def read(self, path: str) -> Optional[bytes]:
        pass

    @abstractmethod
    async def has(self, path: str) -> bool:
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        pass

    @abstractmethod
    async def create_dir(self, path: str) -> bool:
        pass

    @abstractmethod
    async def list_contents(self, path: str = "") -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def get_metadata(self, path: str) -> Optional[Dict[str, Any]]:
        pass

    @abstractmethod
    async def copy(self, path: str, new_path: str) -> bool:
        pass

    @abstractmethod
    async def rename(self, path: str, new_path: str) -> bool:
        pass
