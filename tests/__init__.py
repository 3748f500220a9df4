"""Test suite for the CornexConnect operations API."""
