import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session, declarative_base
from dotenv import load_dotenv

# 从 backend/.env 加载环境变量（backend 目录位于本文件上三级）
backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
env_path = os.path.join(backend_dir, '.env')
load_dotenv(env_path)

DEFAULT_DATABASE_URL = "sqlite:///linkvalidator.db"
DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

# pool_pre_ping 防止 MySQL 等服务端断开空闲连接
engine = create_engine(DATABASE_URL, pool_pre_ping=True)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 线程本地的 scoped session：每个队列 worker 线程各自持有会话
db_session = scoped_session(SessionLocal)

# Base class for models
Base = declarative_base()
Base.query = db_session.query_property()


def init_db():
    """Initialize database tables"""
    import linkvalidator.validation.infrastructure.database.models  # noqa: F401
    Base.metadata.create_all(bind=engine)
