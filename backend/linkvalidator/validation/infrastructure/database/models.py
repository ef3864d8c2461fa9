from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from linkvalidator.shared.db_manager import Base
from datetime import datetime


class PageModel(Base):
    __tablename__ = "pages"

    id = Column(String(36), primary_key=True, comment="Page UUID")
    url = Column(Text, nullable=False, comment="Absolute page URL")
    created_at = Column(DateTime, default=datetime.now, comment="Creation Time")

    # Relationship
    link_results = relationship("LinkResultModel", back_populates="page", cascade="all, delete-orphan")
    job_runs = relationship("JobRunModel", back_populates="page", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<PageModel(id={self.id}, url={self.url})>"


class LinkResultModel(Base):
    __tablename__ = "link_results"

    id = Column(Integer, primary_key=True, autoincrement=True)
    page_id = Column(String(36), ForeignKey("pages.id"), nullable=False, index=True)
    run_id = Column(String(36), nullable=False, index=True, comment="Job run that produced the row")

    url = Column(Text, nullable=False)
    # Exactly one of status_code / error_kind is set
    status_code = Column(Integer, nullable=True)
    error_kind = Column(String(50), nullable=True)
    checked_at = Column(DateTime, default=datetime.now)

    # Relationship
    page = relationship("PageModel", back_populates="link_results")

    def __repr__(self):
        return f"<LinkResultModel(id={self.id}, url={self.url}, status={self.status_code or self.error_kind})>"


class JobRunModel(Base):
    __tablename__ = "job_runs"

    # Autoincrement id gives completion order
    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(String(36), nullable=False, unique=True, comment="Job run identifier")
    page_id = Column(String(36), ForeignKey("pages.id"), nullable=False, index=True)

    result_count = Column(Integer, nullable=False, default=0, comment="Rows persisted by the run")
    finished_at = Column(DateTime, default=datetime.now)

    # Relationship
    page = relationship("PageModel", back_populates="job_runs")

    def __repr__(self):
        return f"<JobRunModel(run_id={self.run_id}, page_id={self.page_id}, results={self.result_count})>"
