"""Shared kernel for the user store.

Holds the small set of types that both the identity context and the
cross-cutting infrastructure depend on, such as the observation context
bound to domain probes.
"""
