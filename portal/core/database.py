"""Database connection and session management"""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse
import ssl
import logging
from portal.core.config import settings

logger = logging.getLogger(__name__)


def mask_url(url: str) -> str:
    """Mask sensitive parts of database URL for logging"""
    try:
        parsed = urlparse(url)
        if parsed.password:
            netloc = parsed.netloc.replace(f":{parsed.password}@", ":***@")
            return urlunparse(parsed._replace(netloc=netloc))
        return url
    except Exception:
        if len(url) > 20:
            return f"{url[:10]}...{url[-10:]}"
        return "***"


def build_engine_arguments(url: str):
    """
    Normalize a database URL and derive driver-specific engine arguments.

    asyncpg does not understand ``sslmode`` in the URL, so it is moved into
    ``connect_args``. SQLite gets no pool sizing.

    Returns:
        Tuple of (url, engine keyword arguments)
    """
    engine_kwargs = {"future": True}

    if url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        return url, engine_kwargs

    connect_args = {}
    if url.startswith("postgresql://") or url.startswith("postgresql+asyncpg://"):
        parsed = urlparse(url)
        query_params = parse_qs(parsed.query)

        sslmode = query_params.pop("sslmode", [None])[0]
        if sslmode in ("verify-ca", "verify-full"):
            connect_args["ssl"] = ssl.create_default_context()
        elif sslmode == "disable":
            connect_args["ssl"] = False
        elif sslmode is not None:
            # Managed databases: encrypted, certificate not verified
            ssl_context = ssl.create_default_context()
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
            connect_args["ssl"] = ssl_context

        url = urlunparse(parsed._replace(query=urlencode(query_params, doseq=True)))
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)

    if connect_args.get("ssl"):
        connect_args["timeout"] = 10

    engine_kwargs.update(
        connect_args=connect_args,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
    )
    return url, engine_kwargs


database_url, _engine_kwargs = build_engine_arguments(settings.database_url)
logger.info(f"DATABASE_URL: {mask_url(database_url)}")

engine = create_async_engine(
    database_url,
    echo=settings.environment == "development" and settings.log_level.upper() == "DEBUG",
    **_engine_kwargs,
)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency for getting database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
