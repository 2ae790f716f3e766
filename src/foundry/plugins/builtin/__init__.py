"""Built-in node plugins, discovered by folder scan."""
