"""Tests for now_departing."""
