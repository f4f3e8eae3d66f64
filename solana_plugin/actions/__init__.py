"""Chat actions backed by the Solana SDK.

Each action parses a chat message, forwards the result to the SDK kit, and reports back through the
host callback with a short text plus a structured payload.
"""
