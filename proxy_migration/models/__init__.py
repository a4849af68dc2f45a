"""
Data models module.

Feature roles, module address sets, constructor arguments for
proxy-dependent features and the proxy lifecycle.
"""
