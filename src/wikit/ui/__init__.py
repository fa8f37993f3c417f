"""Terminal UI for wikit."""
