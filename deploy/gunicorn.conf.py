# Run from src/: gunicorn -c ../deploy/gunicorn.conf.py run:app
bind = "127.0.0.1:8000"

# The pending book lives in process memory; a second worker or a periodic
# worker restart would lose or fork it. Keep one long-lived worker and use
# threads for concurrency.
workers = 1
threads = 8
worker_class = "gthread"

timeout = 60
graceful_timeout = 30
keepalive = 5

# Let systemd/journald handle logs.
accesslog = "-"
errorlog = "-"
loglevel = "info"
capture_output = True

limit_request_line = 4094
limit_request_fields = 100
limit_request_field_size = 8190
