"""podpeek - browse the filesystem of a running container."""
