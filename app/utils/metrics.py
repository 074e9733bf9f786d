from prometheus_client import Counter, Gauge

comments_received = Counter("dashboard_comments_received_total", "Comments accepted")
jobs_created = Counter("dashboard_jobs_created_total", "Scrape jobs created")
submissions_rejected = Counter(
    "dashboard_submissions_rejected_total", "Submissions rejected with 400", ["kind"]
)
events_broadcast = Counter(
    "dashboard_events_broadcast_total", "Events fanned out to all connections", ["event"]
)
connections_active = Gauge("dashboard_connections_active", "Open push-channel connections")
workers_online = Gauge("dashboard_workers_online", "Registered workers currently connected")
