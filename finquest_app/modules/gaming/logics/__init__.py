"""Pure progression rules. No database, no Flask."""
