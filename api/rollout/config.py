import os

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
REDIS_HOST = os.getenv("ROLLOUT_REDIS_HOST", "localhost:6379")
REDIS_SOCKET_TIMEOUT = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

KEY_PREFIX = os.getenv("ROLLOUT_KEY_PREFIX", "dealsff")
RANDOMIZE_PERCENTAGE = os.getenv("ROLLOUT_RANDOMIZE_PERCENTAGE", "0") == "1"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
