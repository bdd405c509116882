"""Gunicorn production configuration."""
import multiprocessing

bind = "0.0.0.0:8000"
workers = multiprocessing.cpu_count() + 1
worker_class = "uvicorn.workers.UvicornWorker"
chdir = "backend"
# An import waits on every chunk of users API calls before responding
timeout = 600
graceful_timeout = 60
keepalive = 5
preload_app = True
accesslog = "-"
errorlog = "-"
loglevel = "info"
