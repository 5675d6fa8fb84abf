"""Core domain package for redwatch.

Core contains the target registries, the tip window, its repair logic and the
poll loop without any reddit or storage-specific code, keeping the business
logic portable.
"""
