"""Pure session primitives: records, shuffling, consensus and session memory."""
