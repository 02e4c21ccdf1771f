# diamond_loader/main.py
from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from diamond_loader.core.logging import setup_logging
from diamond_loader.api.imports import router as import_router

setup_logging()

app = FastAPI(title="Diamond Loader")
app.include_router(import_router)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/health")
async def health():
    return {"status": "ok"}
