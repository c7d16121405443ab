"""Entity storage layer.

This module persists bugs, builds, crashes, and compressed text blobs.
It resolves duplicate chains for the SDK and CLI.
"""
