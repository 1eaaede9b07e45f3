import os

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./audit.db")
MINIO_ENDPOINT = os.getenv("MINIO_ENDPOINT", "minio:9000")
MINIO_ACCESS_KEY = os.getenv("MINIO_ACCESS_KEY", "minioadmin")
MINIO_SECRET_KEY = os.getenv("MINIO_SECRET_KEY", "minioadmin")
MINIO_BUCKET = os.getenv("MINIO_BUCKET", "signing")
MINIO_SECURE = os.getenv("MINIO_SECURE", "false").lower() in ("1", "true", "yes")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
WORKER_QUEUE = os.getenv("WORKER_QUEUE", "signing")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# field kinds the compositing engine draws; everything else is audit-only
RENDERED_FIELD_TYPES = frozenset(
    t.strip() for t in os.getenv("RENDERED_FIELD_TYPES", "signature").split(",") if t.strip()
)
