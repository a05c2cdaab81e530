"""Contains classes and conversion functions for different definitions of time.

Epochs travel through the package as UTC ``datetime`` objects; Julian dates are derived from
them wherever a rotation, ephemeris, or SGP4 epoch needs a continuous day count.
"""
