"""Tests for the firefighter simulation."""
