from pydantic import BaseModel
import os

class Settings(BaseModel):
    # Storage: "memory" keeps records in-process, "redis" persists them
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "memory")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    STORE_PREFIX: str = os.getenv("STORE_PREFIX", "milkledger")

    # Auth/JWT
    JWT_SECRET: str = os.getenv("JWT_SECRET", "devsecret-change-me-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRES_SECONDS: int = int(os.getenv("ACCESS_TOKEN_EXPIRES_SECONDS", "86400"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    BUSINESS_NAME: str = os.getenv("BUSINESS_NAME", "Jay Goga Milk Supplier")

settings = Settings()
