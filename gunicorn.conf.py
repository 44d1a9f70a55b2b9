"""
Gunicorn configuration for the A-List Audit API.

    gunicorn -c gunicorn.conf.py

Env vars that override defaults:
  PORT     — TCP port to bind
  WORKERS  — number of worker processes (default: 2)
"""
import os

wsgi_app = "alist_audit.main:app"

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"
workers = int(os.environ.get("WORKERS", "2"))

# Uvicorn's ASGI loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# Letterboxd fetches are bounded by FEED_TIMEOUT_SECONDS; this is the outer limit.
timeout = 60
graceful_timeout = 30

# Stdout only. Application logs are JSON lines (alist_audit.core.logging_setup).
loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'
