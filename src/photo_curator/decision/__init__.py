"""Turn raw detector output into keep/delete signals."""
