"""Pure classification and formatting core with no I/O and no log output."""
