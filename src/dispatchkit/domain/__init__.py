"""Domain core: the participant registry and the four dispatch disciplines."""
