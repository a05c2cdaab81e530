"""Common mathematics and physics algorithms.

These algorithms are more "general" in that they don't require their own, separate package.
They supply the frames, time scales, bodies, and element sets used by propagation and estimation.
"""
