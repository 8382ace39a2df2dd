from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from archforge import config
from archforge.api.routes import router

app = FastAPI(
    title="ArchForge Architecture Synthesizer",
    version="0.1.0",
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes AFTER middleware
app.include_router(router)
