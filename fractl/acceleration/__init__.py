"""Compiled kernels and the parallel row-band renderer."""
