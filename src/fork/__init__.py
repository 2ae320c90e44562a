"""Fork run orchestration.

This module checks prerequisites, drives the chain binary, and chains
the snapshot fetch and spec splice into one forked genesis build.
"""
