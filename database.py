# database.py
import os
from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker

from errors import ConfigError
from logging_config import get_logger

load_dotenv()

# SQLite par défaut, pour PostgreSQL ou MySQL il suffit de changer DATABASE_URL
# ex: postgresql://monuser:monpassword@db:5432/centralized_forms_db
# ex: mysql+pymysql://monuser:monpassword@db:3306/centralized_forms_db
SQLALCHEMY_DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///centralized_forms.db")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def parse_bool(name: str, raw_value: str) -> bool:
    """Convertit une variable d'environnement en booléen."""
    value = raw_value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(f"Valeur invalide pour {name}: '{raw_value}' (attendu true/false)")


def build_engine(url: str, echo: bool = False, **kwargs):
    """Crée un engine SQLAlchemy, avec les clés étrangères activées pour SQLite."""
    if url.startswith("sqlite"):
        # Nécessaire pour SQLite (FastAPI partage la connexion entre threads)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    db_engine = create_engine(url, echo=echo, **kwargs)

    if db_engine.dialect.name == "sqlite":
        @event.listens_for(db_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return db_engine


engine = build_engine(
    SQLALCHEMY_DATABASE_URL,
    echo=parse_bool("FORMS_SQL_ECHO", os.environ.get("FORMS_SQL_ECHO", "false")),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind=None) -> None:
    """Crée toutes les tables (équivalent du script SQL CREATE TABLE IF NOT EXISTS)."""
    # Import local pour enregistrer les modèles sur Base.metadata
    import models  # noqa: F401

    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)
    get_logger(__name__).info("database_initialized", url=str(target.url))
