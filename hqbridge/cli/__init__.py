"""CLI module for hqbridge."""
