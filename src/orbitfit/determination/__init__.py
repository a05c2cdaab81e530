"""Defines the orbit determination requests, the batch least-squares estimator & the task wrapper running it."""
