"""Tests for the Media Optimizer."""
