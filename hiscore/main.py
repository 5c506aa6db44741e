"""Entry point. Wires the record store into the service and routes.

Persistence strategy:
  - If DATABASE_URL is set  -> PostgreSQL via SQLAlchemy.
  - Otherwise               -> JSON file store (development only).
"""
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hiscore import config
from hiscore.api.routes.leaderboard_routes import router as leaderboard_router, init_routes
from hiscore.application.leaderboard_service import LeaderboardService

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("hiscore.startup")

VERSION = "1.0.0"

app = FastAPI(
    title="hiscore",
    description="Per-leaderboard high-score tables behind opaque API keys.",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Persistence wiring
# ---------------------------------------------------------------------------

if config.DATABASE_URL:
    from hiscore.infrastructure.database.connection import (
        check_health, create_tables, get_session_factory, init_engine,
    )
    from hiscore.infrastructure.repositories.pg_record_store import PgRecordStore

    init_engine(config.DATABASE_URL)
    create_tables()
    store = PgRecordStore(get_session_factory())
    _persistence = "postgresql"
else:
    from hiscore.infrastructure.repositories.json_record_store import JsonRecordStore

    store = JsonRecordStore(data_path=os.path.join(config.DATA_DIR, "leaderboards.json"))
    _persistence = "json"

log.info("Persistence backend: %s", _persistence)

service = LeaderboardService(
    store,
    max_size=config.MAX_LEADERBOARD_SIZE,
    private_key_length=config.PRIVATE_KEY_LENGTH,
    public_key_length=config.PUBLIC_KEY_LENGTH,
    key_max_attempts=config.KEY_GENERATION_MAX_ATTEMPTS,
)
init_routes(service)

app.include_router(leaderboard_router)


@app.get("/")
def root():
    return {"message": "hiscore API is running."}


@app.get("/health")
def health():
    result = {
        "status": "online",
        "system": f"hiscore v{VERSION}",
        "persistence": _persistence,
        "max_leaderboard_size": service.max_size,
    }
    if config.DATABASE_URL:
        result["database"] = "connected" if check_health() else "disconnected"
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("hiscore.main:app", host="0.0.0.0", port=8000, reload=True)
