"""Default configuration values for fsbench.

This module centralizes all hard-coded default values used throughout
the application, making them easy to discover and modify.
"""

from pathlib import Path

# Benchmark target
DEFAULT_MOUNT_POINT = Path("/mnt/ext4_test")
DEFAULT_RESULTS_DIR = Path("~/fs_benchmarks")
DEFAULT_SETTINGS_FILE = Path("~/.fsbench.yaml")
TEST_DIR_NAME = "benchmark"

# Run shape
DEFAULT_NUM_RUNS = 3
DEFAULT_NUM_FILES = 1000
DEFAULT_NUM_JOBS = 1
DEFAULT_BLOCK_SIZE = "4k"

# Validation ranges
NUM_RUNS_MIN = 1
NUM_RUNS_MAX = 10
NUM_FILES_MIN = 100
NUM_FILES_MAX = 10000
NUM_JOBS_MIN = 1
NUM_JOBS_MAX = 64

# Workload invocation
DEFAULT_TRIAL_TIMEOUT_SECONDS = 60
DEFAULT_PIN_CPU = 0
DEFAULT_FIO_RUNTIME_SECONDS = 30
DEFAULT_FIO_SIZE = "512M"
DEFAULT_IO_DEPTH = 32
DEFAULT_MIXED_READ_PERCENT = 70
SEQUENTIAL_FILE_BYTES = 1024**3

# Environment control
DEFAULT_SETTLE_SECONDS = 3.0
DEFAULT_MIN_FREE_GIB = 5
DEFAULT_MONITOR_INTERVAL_SECONDS = 5.0
DEFAULT_KERNEL_LOG_LINES = 30
PERFORMANCE_GOVERNOR = "performance"
REALTIME_PRIORITY = 50
FALLBACK_NICENESS = -10

# Reporting
HIGH_VARIANCE_PERCENT = 10.0
CHART_WIDTH = 50
UNKNOWN_PLACEHOLDER = "unknown"
