"""Performance benchmarks for nlpbench.

This package contains microbenchmarks for function and derivative evaluation
on the dense and sparse backends.
"""
