"""lenticular CLI package."""
