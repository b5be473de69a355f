"""Core: settings, domain models, errors and the deployment services.

The core depends on adapters only through injected callables and the
`ContainerEngine` protocol.
"""
