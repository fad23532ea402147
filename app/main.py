import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import db_path, log_level, seed_demo_data_enabled
from app.db import get_db_connection, create_tables
from app.routes.grids import router as grids_router
from app.routes.volunteer_registrations import router as volunteer_registrations_router
from app.routes.volunteers import router as volunteers_router
from app.seed import seed_demo_data

app = FastAPI(title="shovel-heroes", description="Disaster Relief Volunteer Coordination")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(grids_router)
app.include_router(volunteer_registrations_router)
app.include_router(volunteers_router)

@app.on_event("startup")
def startup():
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    path = db_path()
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_db_connection(path)
    create_tables(conn)
    if seed_demo_data_enabled():
        seed_demo_data(conn)
    app.state.db = conn


@app.on_event("shutdown")
def shutdown():
    app.state.db.close()


@app.get("/healthz")
def healthz():
    return {"status": "ok"}
