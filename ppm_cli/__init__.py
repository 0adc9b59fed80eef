"""Command line surface for the plugin provisioning manager."""
