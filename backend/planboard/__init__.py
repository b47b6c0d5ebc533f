"""Headless Gantt scheduling engine."""
