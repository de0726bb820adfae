"""BOATMRP HTTP planning API and purchase order commit adapter."""
