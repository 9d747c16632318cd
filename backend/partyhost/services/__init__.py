"""Room lifecycle services: registry, sessions, broadcasting."""
