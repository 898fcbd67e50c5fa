"""
Gunicorn configuration for the Daybreak API.

Tuned for Railway / Render single-instance containers.
Env vars that override defaults:
  PORT     — TCP port to bind (Railway sets this automatically)
  WORKERS  — number of worker processes (default: 1)
"""
import os

# Bind to the port Railway/Render injects via $PORT
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Competitions and the planner live in process memory, so every worker
# would hold its own copy. Keep one unless state moves out of process.
workers = int(os.environ.get("WORKERS", "1"))

# Each worker runs Uvicorn's ASGI event loop inside Gunicorn's process manager.
worker_class = "uvicorn.workers.UvicornWorker"

keepalive = 5

# LLM calls can take a while; LLM_TIMEOUT_SECONDS defaults to 60.
timeout = 120

# Structured logging — stdout only (Railway / Render capture it automatically).
loglevel = "info"
accesslog = "-"
errorlog = "-"
access_log_format = '%(h)s "%(r)s" %(s)s %(b)sB %(D)sµs'

# Graceful restart: wait up to 30 s for in-flight requests to finish.
graceful_timeout = 30
