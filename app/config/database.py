from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from .settings import settings

# SQLite (tests / desarrollo local) no permite compartir conexiones entre hilos
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

# Create engine
engine = create_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_recycle=300,
    echo=settings.debug,
    connect_args=connect_args
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()

# Database dependency
def get_db():
    """Database dependency for FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """Crear tablas que aún no existan"""
    # Importar modelos para registrarlos en Base.metadata
    from app.shared.database import models  # noqa: F401
    Base.metadata.create_all(bind=engine)
