"""Global reusable FastAPI dependencies."""
from functools import lru_cache

from kafka_admin.core.config import get_settings
from kafka_admin.services.kafka_service import KafkaService


@lru_cache
def get_kafka_service() -> KafkaService:
    """Return the process-wide service; its cluster client opens on first use."""
    return KafkaService(get_settings())
