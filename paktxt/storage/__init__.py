"""Archive transports (files and clipboard) for paktxt."""
