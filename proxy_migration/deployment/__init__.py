"""
Deployment primitive module.

The execution-environment seam the orchestrators deploy through: an
abstract deployer, a web3-backed implementation and a simulated in-memory
environment for dry runs.
"""
