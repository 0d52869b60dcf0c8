"""Courier Desk - package intake, tracking and billing service."""
