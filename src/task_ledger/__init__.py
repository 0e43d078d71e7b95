"""Per-user task registry with soft delete and day-bucketed "today" views."""
