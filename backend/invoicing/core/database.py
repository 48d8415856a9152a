"""
Configurazione Database - SQLAlchemy 2.0 Async
Progetto: Invoicing (Gestionale Preventivi e Fatture)

Definisce l'handle del database (engine + session factory), la dependency
injection per FastAPI e la traduzione degli errori di connessione
in StoreUnavailableError.

L'handle non è un'istanza globale: viene costruito esplicitamente
(nel lifespan dell'applicazione, negli script o nei test) e passato
a chi ne ha bisogno.
"""

import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, AsyncIterator, Awaitable, Callable, Optional, TypeVar

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from invoicing.core.config import Settings, get_settings
from invoicing.core.exceptions import StoreUnavailableError

# Logger per questo modulo
logger = logging.getLogger(__name__)

T = TypeVar("T")


class Database:
    """
    Handle del database.

    Incapsula engine e session factory con inizializzazione
    e rilascio espliciti.

    Usage:
        database = Database.from_settings(settings)
        await database.connect()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        **engine_kwargs: Any,
    ) -> None:
        """
        Args:
            url: URL di connessione in formato async (postgresql+asyncpg, sqlite+aiosqlite)
            echo: Log delle query SQL
            pool_size: Connessioni permanenti nel pool (ignorato per SQLite)
            max_overflow: Connessioni extra oltre pool_size (ignorato per SQLite)
            engine_kwargs: Argomenti aggiuntivi per create_async_engine
        """
        self.url = url
        self.is_sqlite = url.startswith("sqlite")

        options: dict[str, Any] = {"echo": echo}
        if not self.is_sqlite:
            options["pool_pre_ping"] = True  # Verifica connessione prima di usarla
            if pool_size is not None:
                options["pool_size"] = pool_size
            if max_overflow is not None:
                options["max_overflow"] = max_overflow
        options.update(engine_kwargs)

        self.engine: AsyncEngine = create_async_engine(url, **options)

        if self.is_sqlite:
            # SQLite non applica le foreign key senza questo pragma
            @event.listens_for(self.engine.sync_engine, "connect")
            def _enable_sqlite_foreign_keys(dbapi_conn, connection_record) -> None:
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Costruisce l'handle a partire dalla configurazione applicativa."""
        return cls(
            settings.database_url,
            echo=settings.debug,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
        )

    async def connect(self) -> None:
        """
        Verifica che il database sia raggiungibile.

        Raises:
            StoreUnavailableError: Se la connessione fallisce
        """
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as exc:
            if is_store_unavailable(exc):
                logger.error("Errore connessione database: %s", exc.__class__.__name__)
                raise StoreUnavailableError() from exc
            raise
        logger.info("Connessione al database stabilita con successo")

    async def create_all(self) -> None:
        """Crea tutte le tabelle dei modelli."""
        from invoicing.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        """Elimina tutte le tabelle dei modelli."""
        from invoicing.models import Base

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        Apre una sessione con rollback in caso di errore e chiusura garantita.

        Il commit resta responsabilità del chiamante (una richiesta = una
        unità di lavoro).
        """
        async with self.session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    async def dispose(self) -> None:
        """
        Chiude le connessioni al database.

        Da chiamare durante lo shutdown dell'applicazione.
        """
        await self.engine.dispose()
        logger.info("Connessioni database chiuse")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency injection per FastAPI.

    Crea una sessione database per ogni richiesta dall'handle
    registrato su app.state e la chiude automaticamente al termine.

    Yields:
        AsyncSession: Sessione database async

    Example:
        @router.get("/customers")
        async def get_customers(db: AsyncSession = Depends(get_db)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session


# ------------------------------------------------------------
# Errori di connessione
# ------------------------------------------------------------

def is_store_unavailable(exc: BaseException) -> bool:
    """
    True se l'eccezione indica che il database non è raggiungibile.

    Gli errori di integrità o di sintassi SQL NON rientrano in questa categoria.
    """
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    return isinstance(exc, (OperationalError, InterfaceError, ConnectionError, TimeoutError))


async def _rollback_quietly(db: AsyncSession) -> None:
    """Rollback dopo un errore di connessione, tollerando una connessione già persa."""
    try:
        await db.rollback()
    except Exception as exc:
        if not is_store_unavailable(exc):
            raise
        logger.debug("Rollback non riuscito su connessione persa: %s", exc.__class__.__name__)


def retry_read(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """
    Decoratore per i metodi di SOLA LETTURA dei service.

    Ripete la chiamata quando il database non è raggiungibile, fino a
    `store_read_retries` tentativi aggiuntivi, con rollback della sessione
    tra un tentativo e l'altro. Esauriti i tentativi solleva
    StoreUnavailableError.

    Da non usare su metodi che scrivono: un rollback scarterebbe le
    scritture già inviate nella stessa unità di lavoro.
    """

    @functools.wraps(func)
    async def wrapper(self, db: AsyncSession, *args: Any, **kwargs: Any) -> T:
        attempts = get_settings().store_read_retries + 1
        attempt = 1
        while True:
            try:
                return await func(self, db, *args, **kwargs)
            except Exception as exc:
                if not is_store_unavailable(exc):
                    raise
                logger.warning(
                    "Database non raggiungibile in %s (tentativo %s/%s)",
                    func.__qualname__, attempt, attempts,
                )
                await _rollback_quietly(db)
                if attempt >= attempts:
                    raise StoreUnavailableError() from exc
                attempt += 1

    return wrapper


def map_store_errors(
    func: Callable[..., Awaitable[T]],
) -> Callable[..., Awaitable[T]]:
    """
    Decoratore per i metodi che SCRIVONO.

    Traduce gli errori di connessione in StoreUnavailableError senza
    alcun nuovo tentativo: ripetere una creazione la duplicherebbe.
    """

    @functools.wraps(func)
    async def wrapper(self, db: AsyncSession, *args: Any, **kwargs: Any) -> T:
        try:
            return await func(self, db, *args, **kwargs)
        except Exception as exc:
            if not is_store_unavailable(exc):
                raise
            logger.error("Database non raggiungibile in %s", func.__qualname__)
            await _rollback_quietly(db)
            raise StoreUnavailableError() from exc

    return wrapper
