"""Domain layer: class-path model, ports and predicates."""
