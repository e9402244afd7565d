import os
from dataclasses import dataclass, field


DEFAULT_DB_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "acca.db")


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv("ACCA_DATABASE_URL", os.getenv("DATABASE_URL", f"sqlite:///{DEFAULT_DB_PATH}"))
    jwt_secret: str = os.getenv("SUPABASE_JWT_SECRET", os.getenv("JWT_SECRET", "change-me-in-production"))
    jwt_algorithm: str = os.getenv("ACCA_JWT_ALGORITHM", "HS256")
    jwt_audience: str = os.getenv("ACCA_JWT_AUDIENCE", "authenticated")
    jwt_exp_minutes: int = int(os.getenv("ACCA_JWT_EXP_MINUTES", "60"))
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_origins(os.getenv("ACCA_CORS_ORIGINS", "http://localhost:3000"))
    )
    log_level: str = os.getenv("ACCA_LOG_LEVEL", "INFO").upper()


settings = Settings()
