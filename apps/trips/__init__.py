"""Trip catalogue: categories, trips, dated schedules and their seat inventory."""
