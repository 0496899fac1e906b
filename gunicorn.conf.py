import multiprocessing
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)

wsgi_app = "pulpito.wsgi:application"
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", min(2, multiprocessing.cpu_count())))
threads = 4
max_requests = 1000
max_requests_jitter = 50
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
