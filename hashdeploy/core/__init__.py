"""Core engine: precondition, relocation, naming, and the plugin wiring."""
