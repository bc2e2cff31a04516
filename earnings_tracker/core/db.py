from sqlmodel import create_engine, SQLModel
from .config import settings

# ✅ IMPORTAR TODOS LOS MODELOS
from earnings_tracker.models import WeeklyEarnings


def build_engine(database_url: str, echo: bool = False):
    """Crea el engine; SQLite necesita compartir la conexión entre hilos"""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=echo, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)


def create_all_tables(bind=None):
    """Crea todas las tablas en la base de datos"""
    SQLModel.metadata.create_all(bind or engine)
