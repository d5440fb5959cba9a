"""Search core: filter normalization, category translation, page composition."""
