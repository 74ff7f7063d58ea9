from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from s3direct.config import get_cors_allow_origins
from s3direct.routers import uploads_router

app = FastAPI(
    title="s3direct",
    description="Signed browser POST uploads straight to S3",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_allow_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(uploads_router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "s3direct"}
