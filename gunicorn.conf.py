# gunicorn.conf.py
import os

bind = f"0.0.0.0:{os.getenv('PORT', '8080')}"
workers = int(os.getenv("WEB_CONCURRENCY", "2"))  # schaalbaar via env
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "discovery_intake.main:app"
preload_app = False
# HubSpot calls + optionele 2s delay + foto uploads
timeout = 60
graceful_timeout = 30
keepalive = 5
max_requests = 1000
max_requests_jitter = 100
accesslog = "-"
errorlog = "-"
loglevel = "info"
