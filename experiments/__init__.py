"""Experiment harness: scenarios, replications and reporting."""
