"""Reference frame transformations and the Earth orientation data they depend on."""
