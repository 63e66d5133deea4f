"""Application layer: checker service, reporters, configuration discovery."""
