"""Test suite for ghdigest."""
