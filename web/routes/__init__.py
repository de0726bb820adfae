"""Route handlers for the BOATMRP planning API."""
