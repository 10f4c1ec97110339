"""Gunicorn config for serving granthub.main:app.

    gunicorn -c gunicorn.conf.py granthub.main:app
"""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Each worker runs the lifespan hook, so each fetches the published sheet
# and holds its own GrantStore. POST /api/reload only refreshes the worker
# that receives it.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# Startup blocks on the sheet download; Google can take a while to respond
timeout = 120
graceful_timeout = 30
keepalive = 65

accesslog = "-"
errorlog = "-"
loglevel = "info"
