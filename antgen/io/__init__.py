"""IO layer: Arrow schemas, output paths and persistence helpers."""
