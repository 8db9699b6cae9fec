"""Image Update Checker.

Checks image tag references in Dockerfiles and compose manifests against the
tags published in a registry and classifies the available updates as breaking
or compatible according to a user-authored version pattern.
"""
