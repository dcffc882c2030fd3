"""Core domain logic for evolvedash: storage, discovery, generation, services."""
