"""JSON conversion and transport contracts."""
