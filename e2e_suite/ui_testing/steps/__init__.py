"""Step definitions for the browser feature files."""
