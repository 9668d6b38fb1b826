"""SQLite-backed feature/event log shared by all Inkswift modules."""
