"""
kubexec - Remote command execution for Kubernetes pods

Runs commands inside pod containers and reports classified outcomes, and
finds the distinct pods worth targeting in a namespace.

Architecture:
- Each module is self-contained with clear interfaces
- Modules are completely replaceable
- No module knows the internals of another
- All communication through defined interfaces

Modules:
- exitcodes: Exit status taxonomy
- ratelimit: Dispatch rate limiting
- executor: Remote command execution
- probe: File access with tooling fallbacks
- discovery: Representative pod and image discovery
- cluster: Kubernetes client loading
- auth: API key authentication
- api: REST API payloads
"""

__version__ = "1.0.0"
