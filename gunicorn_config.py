"""Gunicorn configuration for production.

Run with: gunicorn -c gunicorn_config.py "chat_messages:create_app()"
"""
import multiprocessing
import os

# Server socket
port = os.getenv("PORT", "8000")
bind = f"0.0.0.0:{port}"
backlog = 2048

# Worker processes
workers_env = os.getenv("GUNICORN_WORKERS")
if workers_env:
    workers = int(workers_env)
else:
    # Requests are short storage round-trips; scale with CPUs, capped at 8
    workers = min(max(multiprocessing.cpu_count() * 2, 2), 8)

worker_class = "sync"
timeout = 30
keepalive = 5
graceful_timeout = 30

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'
capture_output = True

# Process naming
proc_name = "chat-messages"

# Server mechanics
daemon = False
pidfile = None
