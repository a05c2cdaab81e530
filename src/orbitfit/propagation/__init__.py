"""Defines the uniform propagator contract used by the estimator & its numerical/analytical implementations."""
