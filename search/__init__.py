"""Filtered search over the profile dataset, served from AWS Lambda."""
