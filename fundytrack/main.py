# fundytrack/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fundytrack.core.config import settings
from fundytrack.core.logging import setup_logging
from fundytrack.api.v1.api import api_router as api_router_v1

setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# The frontend runs on another origin and sends credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router_v1, prefix=settings.API_V1_STR)

@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} running"}
