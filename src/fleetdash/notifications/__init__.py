"""Notification feed.

Synthesis of the seed feed from aggregated data, the in-memory
notification store, and the policy that decides how a refreshed seed is
applied to an already populated store.
"""
