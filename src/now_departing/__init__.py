"""Now Departing: live subway arrivals for a list of favorite stations."""
