"""Player-facing text: system scans, status reports and order templates."""
