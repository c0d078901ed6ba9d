"""Core helpers of Locksmith."""
