"""TaskFlow: project/task tracking with deadline automation."""
