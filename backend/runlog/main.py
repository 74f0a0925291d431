from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from runlog.api.goals import router as goals_router
from runlog.api.runs import router as runs_router
from runlog.db import Base, engine
from runlog.models.goal import Goal  # noqa: F401  (import ensures table is registered)
from runlog.models.run import Run  # noqa: F401


app = FastAPI(title="Runlog goals API")

# Allow CORS for local frontend
origins = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create DB tables (goals, runs) on startup
Base.metadata.create_all(bind=engine)

app.include_router(goals_router)
app.include_router(runs_router)


@app.get("/")
def root():
    return {"message": "Runlog goals API is running"}
