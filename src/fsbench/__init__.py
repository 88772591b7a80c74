"""fsbench - filesystem micro-benchmark runner.

Runs a fixed set of block I/O and metadata workloads under controlled
CPU and cache conditions, summarizes the samples and stores the results
for later comparison.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
