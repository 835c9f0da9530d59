"""Zip archiving of directory trees."""
