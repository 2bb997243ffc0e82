"""Provider availability and slot-status resolution service."""
