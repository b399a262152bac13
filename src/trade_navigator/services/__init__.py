"""Services subpackage - caching, history and saved calculations around the engine."""
