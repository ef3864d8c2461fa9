from typing import List, Optional
from sqlalchemy.orm import Session
from linkvalidator.shared.db_manager import db_session
from .models import PageModel, LinkResultModel, JobRunModel
from .i_link_dao import ILinkDao


class SqlAlchemyLinkDaoImpl(ILinkDao):
    """
    SQLAlchemy implementation of ILinkDao
    """

    def __init__(self, session: Session = None):
        """
        :param session: Optional session for testing, otherwise uses global scoped session
        """
        self._session = session if session else db_session

    def create_page(self, page: PageModel) -> None:
        try:
            self._session.add(page)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def get_page_by_id(self, page_id: str) -> Optional[PageModel]:
        return self._session.query(PageModel).filter(PageModel.id == page_id).first()

    def add_link_result(self, result: LinkResultModel) -> int:
        try:
            self._session.add(result)
            self._session.commit()
            return result.id
        except Exception:
            self._session.rollback()
            raise

    def get_link_results(self, page_id: str, run_id: Optional[str] = None) -> List[LinkResultModel]:
        query = self._session.query(LinkResultModel).filter(LinkResultModel.page_id == page_id)
        if run_id is not None:
            query = query.filter(LinkResultModel.run_id == run_id)
        return query.order_by(LinkResultModel.id).all()

    def add_run(self, run: JobRunModel) -> None:
        try:
            self._session.add(run)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def get_run_ids(self, page_id: str) -> List[str]:
        rows = (
            self._session.query(JobRunModel.run_id)
            .filter(JobRunModel.page_id == page_id)
            .order_by(JobRunModel.id)
            .all()
        )
        return [run_id for (run_id,) in rows]
