# config/settings/local.py
import os

os.environ.setdefault("DB_ENGINE", "sqlite")

from .base import *  # noqa: E402,F401,F403

DEBUG = os.getenv("DJANGO_DEBUG", "1") == "1"
