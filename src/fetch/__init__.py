"""Live chain state download.

This module walks the storage keyspace in fixed-size chunks over RPC.
It streams every key-value pair into a reusable snapshot file.
"""
