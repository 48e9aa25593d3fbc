"""Event model and the transforms applied before an event is exported."""
