# app/main.py
from fastapi import FastAPI
from app.config import settings
from app.core.logging_config import setup_logging
from app.database import engine, Base
from app.models.user import User  # registers tables on Base.metadata
from app.models.evaluation import Evaluation
from app.models.metric import Metric
from app.routers import users, evaluations
from app.services.cache import StaffCache
import logging
from sqlalchemy import exc as sa_exc


app = FastAPI(title="Staff Roster - personnel, evaluations and raise tracking", version="1.0")

# Include Routers
app.include_router(users.router)
app.include_router(evaluations.router)

# Create DB Tables (for demo only; run "alembic upgrade head" in prod)
@app.on_event("startup")
async def startup_event():
    setup_logging(settings.LOG_LEVEL)

    # One read-through cache per process, shared by every request
    app.state.cache = StaffCache()

    # create tables (async). ignore duplicate-object errors from previous partial runs.
    async with engine.begin() as conn:
        try:
            await conn.run_sync(Base.metadata.create_all)
        except sa_exc.IntegrityError as e:
            msg = str(getattr(e, "orig", e))
            if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                logging.warning("Ignored duplicate DDL error during create_all: %s", msg)
            else:
                raise

@app.get("/")
def read_root():
    return {"message": "Welcome to the Staff Roster backend"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
