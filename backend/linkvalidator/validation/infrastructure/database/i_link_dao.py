from abc import ABC, abstractmethod
from typing import List, Optional
from .models import PageModel, LinkResultModel, JobRunModel


class ILinkDao(ABC):
    """
    Interface for Link Validation Data Access Object
    """

    @abstractmethod
    def create_page(self, page: PageModel) -> None:
        """Create a new page"""
        pass

    @abstractmethod
    def get_page_by_id(self, page_id: str) -> Optional[PageModel]:
        """Get a page by ID"""
        pass

    @abstractmethod
    def add_link_result(self, result: LinkResultModel) -> int:
        """Add a link result and return its ID"""
        pass

    @abstractmethod
    def get_link_results(self, page_id: str, run_id: Optional[str] = None) -> List[LinkResultModel]:
        """Get link results for a page, optionally for a single run"""
        pass

    @abstractmethod
    def add_run(self, run: JobRunModel) -> None:
        """Record a finished job run"""
        pass

    @abstractmethod
    def get_run_ids(self, page_id: str) -> List[str]:
        """Get the finished run IDs of a page, oldest first"""
        pass
