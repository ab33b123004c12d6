"""PostgreSQL bulk insert boundary."""
