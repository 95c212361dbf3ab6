"""Domain layer: the catalog's entities and their persistence contracts."""
