"""Dashboard figures for administrators and vendors."""
