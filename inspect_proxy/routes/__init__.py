"""HTTP handlers for the inspect proxy."""
