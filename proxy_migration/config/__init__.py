"""
Deployment configuration module.

Default parameters, shallow override merging, per-network YAML loading and
validation of caller-supplied configuration.
"""
