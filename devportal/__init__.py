"""Developer portal service layer."""
