"""Shared configuration for the playground client."""
