"""Shared test helpers: recording fakes and sample test classes."""
